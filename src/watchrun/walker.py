"""Recursive expansion of directories into the regular files they contain."""

import logging
import os
from typing import List, Optional, Set

from .exceptions import TraversalError
from .matcher import is_excluded
from .models import ExcludeSet, FileKind, WatchTarget, canonicalize

logger = logging.getLogger(__name__)


class TreeWalker:
    """
    Depth-first directory walker with exclusion pruning.

    Uses an explicit stack of pending directories and a visited set keyed
    by canonical path, so symlink cycles terminate.
    """

    def __init__(self, excludes: Optional[ExcludeSet] = None):
        self.excludes = excludes or ExcludeSet()

    def expand(self, root: str) -> List[WatchTarget]:
        """
        Expand a directory into the regular files beneath it.

        Args:
            root: Canonical path of the directory

        Returns:
            Watch targets for every non-excluded regular file found
        """
        targets: List[WatchTarget] = []
        if is_excluded(root, self.excludes):
            return targets

        visited: Set[str] = set()
        stack = [root]

        while stack:
            directory = stack.pop()
            if directory in visited:
                continue
            visited.add(directory)

            try:
                files, subdirs = self._scan(directory)
            except TraversalError as e:
                logger.error(str(e))
                continue

            targets.extend(WatchTarget(path) for path in files)
            # reversed so subdirectories are walked in name order
            stack.extend(reversed(subdirs))

        return targets

    def _scan(self, directory: str):
        """
        List one directory, split into files and subdirectories.

        Raises:
            TraversalError: If the directory cannot be opened
        """
        files: List[str] = []
        subdirs: List[str] = []

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise TraversalError(f"failed to open dir: {directory}: {e.strerror or e}") from e

        for entry in entries:
            path = self._child_path(directory, entry)
            if path is None or is_excluded(path, self.excludes):
                continue

            kind = self._kind(entry, path)
            if kind is FileKind.DIRECTORY:
                subdirs.append(path)
            elif kind is FileKind.FILE:
                files.append(path)

        return files, subdirs

    def _child_path(self, directory: str, entry: os.DirEntry) -> Optional[str]:
        path = os.path.join(directory, entry.name)
        if not entry.is_symlink():
            return path
        try:
            return canonicalize(path)
        except OSError as e:
            logger.warning(f"skipping dangling link: {path}: {e.strerror or e}")
            return None

    def _kind(self, entry: os.DirEntry, path: str) -> Optional[FileKind]:
        try:
            if entry.is_symlink():
                return FileKind.from_mode(os.stat(path).st_mode)
            if entry.is_dir(follow_symlinks=False):
                return FileKind.DIRECTORY
            if entry.is_file(follow_symlinks=False):
                return FileKind.FILE
            return FileKind.OTHER
        except OSError as e:
            logger.warning(f"failed to stat: {path}: {e.strerror or e}")
            return None
