"""Main watchrun orchestrator."""

import logging
from typing import List, Optional

from .config import WatchConfig
from .models import ExcludeSet, WatchTarget
from .reactor import EventReactor
from .resolver import WatchSetResolver
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class WatchRunProcess:
    """
    Wires configuration to the resolver, reactor and command runner.

    Startup runs one way: resolve the watch set, register it, then loop.
    """

    def __init__(self, config: WatchConfig, source=None):
        """
        Initialize the process.

        Args:
            config: Session configuration
            source: Event source for the reactor (default: FSEventSource)

        Raises:
            ConfigError: If the configuration is invalid
        """
        config.validate()
        self.config = config
        self.excludes = ExcludeSet.from_entries(config.exclude_entries)
        self.resolver = WatchSetResolver(self.excludes)
        self.runner = CommandRunner(config.command, config.options)
        self._source = source
        self._reactor: Optional[EventReactor] = None

    def resolve(self) -> List[WatchTarget]:
        """Resolve the configured watch entries into the watch list."""
        watch_list = self.resolver.resolve(self.config.watch_entries)
        logger.debug(f"resolved {len(watch_list)} file(s) to watch")
        return watch_list

    def reactor(self) -> EventReactor:
        """Build (once) the reactor for the resolved watch list."""
        if self._reactor is None:
            self._reactor = EventReactor(
                self.resolve(),
                self.runner,
                self.config.options,
                source=self._source,
            )
        return self._reactor

    def start(self) -> None:
        """Run the watch loop (blocking, until the process is stopped)."""
        self.reactor().run()
