"""File modification notifications using the watchdog library."""

import logging
import os
import queue
import threading
import time
from typing import Callable, Dict, List, Optional, Set

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .exceptions import EventWaitError, RegistrationError
from .models import ChangeEvent, WatchTarget

logger = logging.getLogger(__name__)


class FSEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog modification events to ChangeEvent."""

    def __init__(self, callback: Callable[[ChangeEvent], None], targets: Set[str]):
        super().__init__()
        self.callback = callback
        self.targets = targets

    def on_modified(self, event):
        if event.is_directory:
            return
        path = os.fsdecode(event.src_path)
        if path not in self.targets:
            return
        self.callback(ChangeEvent(path=path, modified=True, timestamp=time.time()))


class FSEventSource:
    """
    Delivers batches of ready modification events for registered files.

    Each registered file's parent directory is scheduled once, non-recursively,
    on a watchdog observer; the handler filters events down to registered
    paths and pushes them onto a queue that wait() drains.
    """

    def __init__(
        self,
        observer_factory: Callable[[], Observer] = Observer,
        poll_interval: float = 0.5,
    ):
        """
        Initialize the event source.

        Args:
            observer_factory: Callable creating a watchdog observer
            poll_interval: Seconds between liveness checks while waiting
        """
        self.observer_factory = observer_factory
        self.poll_interval = poll_interval
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue()
        self._targets: Set[str] = set()
        self._handler = FSEventHandler(self._queue.put, self._targets)
        self._directories: Dict[str, object] = {}
        self._observer: Optional[Observer] = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the observer thread."""
        with self._lock:
            if self._observer is not None:
                return
            self._observer = self.observer_factory()
            self._observer.start()

    def stop(self) -> None:
        """Stop the observer thread."""
        with self._lock:
            observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=5.0)

    def register(self, target: WatchTarget) -> None:
        """
        Register a file for modification notifications.

        Args:
            target: The file to watch

        Raises:
            RegistrationError: If the file cannot be opened or watched
        """
        try:
            with open(target.path, "rb"):
                pass
        except OSError as e:
            raise RegistrationError(f"failed to open file: {target.path}: {e.strerror or e}") from e

        directory = os.path.dirname(target.path)
        with self._lock:
            if directory not in self._directories:
                if self._observer is None:
                    raise RegistrationError(f"event source not started: {target.path}")
                try:
                    watch = self._observer.schedule(self._handler, directory, recursive=False)
                except OSError as e:
                    raise RegistrationError(f"failed to watch dir: {directory}: {e.strerror or e}") from e
                self._directories[directory] = watch
            self._targets.add(target.path)

    def wait(self, timeout: Optional[float] = None) -> List[ChangeEvent]:
        """
        Block until at least one event is ready and return the ready batch.

        Repeated events for the same path within one batch are collapsed,
        so each registered file reports at most once per call.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            Ready events in arrival order; empty on timeout

        Raises:
            EventWaitError: If the observer thread has died
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            self._check_alive()
            block_for = self.poll_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return []
                block_for = min(block_for, remaining)
            try:
                first = self._queue.get(timeout=block_for)
                break
            except queue.Empty:
                continue

        batch = [first]
        seen = {first.path}
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                break
            if event.path in seen:
                continue
            seen.add(event.path)
            batch.append(event)
        return batch

    def _check_alive(self) -> None:
        with self._lock:
            observer = self._observer
        if observer is None:
            raise EventWaitError("event source not started")
        if observer.is_alive():
            return
        self._restart()
        raise EventWaitError("event observer stopped; restarted")

    def _restart(self) -> None:
        """Replace a dead observer, re-scheduling every watched directory."""
        with self._lock:
            observer = self.observer_factory()
            for directory in list(self._directories):
                try:
                    self._directories[directory] = observer.schedule(
                        self._handler, directory, recursive=False,
                    )
                except OSError as e:
                    logger.error(f"failed to watch dir: {directory}: {e.strerror or e}")
            try:
                observer.start()
            except OSError as e:
                raise EventWaitError(f"failed to restart event observer: {e}") from e
            self._observer = observer

    @property
    def watched_paths(self) -> List[str]:
        with self._lock:
            return sorted(self._targets)

    def __len__(self) -> int:
        """Return the number of registered files."""
        with self._lock:
            return len(self._targets)
