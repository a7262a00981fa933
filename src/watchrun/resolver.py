"""Resolution of user watch entries into the flat list of files to watch."""

import logging
import os
from typing import Iterable, List, Optional, Set

from .exceptions import ResolveError, UnsupportedFileTypeError
from .matcher import is_excluded
from .models import ExcludeSet, FileKind, WatchTarget, canonicalize
from .walker import TreeWalker

logger = logging.getLogger(__name__)


class WatchSetResolver:
    """
    Turns watch entries (files or directories) into a WatchList.

    Directories are expanded with a TreeWalker. Failures on a single entry
    are logged and the entry is skipped. The result holds each canonical
    path once, in first-seen order.
    """

    def __init__(self, excludes: Optional[ExcludeSet] = None, walker: Optional[TreeWalker] = None):
        self.excludes = excludes or ExcludeSet()
        self.walker = walker or TreeWalker(self.excludes)

    def resolve(self, entries: Iterable[str] = ()) -> List[WatchTarget]:
        """
        Resolve watch entries into watch targets.

        Args:
            entries: User-supplied paths; empty means the current directory

        Returns:
            Deduplicated list of regular-file watch targets
        """
        entries = list(entries) or [os.getcwd()]

        watch_list: List[WatchTarget] = []
        seen: Set[str] = set()

        for entry in entries:
            try:
                targets = self._resolve_entry(entry)
            except ResolveError as e:
                logger.error(str(e))
                continue

            for target in targets:
                if target.path in seen:
                    logger.debug(f"duplicate watch target: {target.path}")
                    continue
                seen.add(target.path)
                watch_list.append(target)

        return watch_list

    def _resolve_entry(self, entry: str) -> List[WatchTarget]:
        """
        Resolve a single entry.

        Raises:
            ResolveError: If the entry cannot be canonicalized or stat'ed
            UnsupportedFileTypeError: If it is not a file or directory
        """
        try:
            path = canonicalize(entry)
        except OSError as e:
            raise ResolveError(f"failed to resolve path: {entry}: {e.strerror or e}") from e

        if is_excluded(path, self.excludes):
            logger.debug(f"excluded: {path}")
            return []

        try:
            kind = FileKind.from_mode(os.stat(path).st_mode)
        except OSError as e:
            raise ResolveError(f"failed to stat: {path}: {e.strerror or e}") from e

        if kind is FileKind.FILE:
            return [WatchTarget(path)]
        if kind is FileKind.DIRECTORY:
            return self.walker.expand(path)
        raise UnsupportedFileTypeError(f"unsupported file type: {path}")
