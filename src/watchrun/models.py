"""Data models for watchrun."""

import os
import stat
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple


class FileKind(Enum):
    """What a canonical path refers to."""
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "FileKind":
        if stat.S_ISREG(mode):
            return cls.FILE
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        return cls.OTHER


class SpawnState(Enum):
    """States of a single reaction spawn."""
    SPAWNING = "spawning"
    EXECING = "execing"
    DETACHING = "detaching"
    DONE = "done"
    FAILED = "failed"


def canonicalize(path: str, strict: bool = True) -> str:
    """
    Resolve a path to its absolute, symlink-free form.

    Args:
        path: Path to resolve, relative to the current directory if not absolute
        strict: If True, raise OSError when the path (or a link in it) is missing

    Returns:
        The canonical path string
    """
    return os.path.realpath(path, strict=strict)


class ExcludeSet:
    """
    Immutable, ordered collection of canonical paths to exclude.

    Membership is exact string equality; no prefix or wildcard matching.
    """

    __slots__ = ("_paths",)

    def __init__(self, paths: Iterable[str] = ()):
        self._paths: Tuple[str, ...] = tuple(paths)

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> "ExcludeSet":
        """Canonicalize user-supplied entries; missing paths are allowed."""
        return cls(canonicalize(entry, strict=False) for entry in entries)

    @property
    def paths(self) -> Tuple[str, ...]:
        return self._paths

    def __contains__(self, path: object) -> bool:
        for excluded in self._paths:
            if path == excluded:
                return True
        return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"ExcludeSet({list(self._paths)!r})"


@dataclass(frozen=True)
class WatchTarget:
    """
    A regular file registered for modification notifications.

    Attributes:
        path: Canonical absolute path of the file
    """
    path: str

    def __post_init__(self):
        if not os.path.isabs(self.path):
            raise ValueError(f"path must be absolute: {self.path}")

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ChangeEvent:
    """
    A ready notification for a watched file.

    Attributes:
        path: Canonical path of the watch target that signalled
        modified: Whether the notification carries the modification flag
        timestamp: Unix timestamp when the event was observed
    """
    path: str
    modified: bool = True
    timestamp: float = field(default_factory=time.time)


@dataclass
class Reaction:
    """
    Record of one reaction command invocation.

    Attributes:
        command: Argv of the reaction command
        trigger: Canonical path of the file whose change triggered it
        wait: Whether the watch loop waited for the command to finish
        state: Current spawn state
        pid: Pid of the immediate child, once forked
        status: Exit code of the immediate child, once reaped
    """
    command: Tuple[str, ...]
    trigger: str
    wait: bool
    state: SpawnState = SpawnState.SPAWNING
    pid: Optional[int] = None
    status: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.state is SpawnState.FAILED
