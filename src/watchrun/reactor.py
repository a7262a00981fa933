"""The watch loop: maps modification events to reaction commands."""

import logging
from typing import List, Optional, Sequence

from .config import RunOptions
from .exceptions import EventWaitError, RegistrationError
from .fs_watcher import FSEventSource
from .models import WatchTarget
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class EventReactor:
    """
    Registers watch targets with an event source and reacts to changes.

    The event source must provide ``start()``, ``stop()``,
    ``register(target)`` and ``wait(timeout)``; FSEventSource is used
    when none is given.
    """

    def __init__(
        self,
        watch_list: Sequence[WatchTarget],
        runner: CommandRunner,
        options: Optional[RunOptions] = None,
        source=None,
    ):
        self.watch_list = tuple(watch_list)
        self.runner = runner
        self.options = options or runner.options
        self.source = source if source is not None else FSEventSource()
        self.active: List[WatchTarget] = []

    def register(self) -> List[WatchTarget]:
        """
        Register every watch target with the event source.

        Targets that fail to register are logged and left out; the loop
        runs with whatever subset succeeded.

        Returns:
            The targets that were registered
        """
        active = []
        for target in self.watch_list:
            try:
                self.source.register(target)
            except RegistrationError as e:
                logger.error(str(e))
                continue
            logger.info(f"watch: {target.path}")
            active.append(target)

        self.active = active
        return active

    def poll_once(self, timeout: Optional[float] = None) -> int:
        """
        Wait for one batch of ready events and react to it.

        With coalescing enabled only the first event of the batch is
        reacted to; the rest of the batch is dropped.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            Number of reactions started

        Raises:
            EventWaitError: If waiting for events failed
        """
        batch = self.source.wait(timeout)
        if self.options.coalesce:
            batch = batch[:1]

        count = 0
        for event in batch:
            if not event.modified:
                continue
            logger.info(f"file changed: {event.path}")
            self.runner.run(event.path)
            count += 1
        return count

    def run(self) -> None:
        """
        Start watching and react to changes until the process is stopped.

        Event-wait failures are logged and the wait is retried immediately.
        """
        self.source.start()
        try:
            self.register()
            if not self.active:
                logger.warning("no files are being watched")
            while True:
                try:
                    self.poll_once()
                except EventWaitError as e:
                    logger.error(f"failed to receive events: {e}")
        finally:
            self.source.stop()
