"""Configuration for watchrun."""

import os
from dataclasses import dataclass, field
from typing import List

from .exceptions import ConfigError


ENV_WAIT = "WATCHRUN_WAIT"
ENV_COALESCE = "WATCHRUN_COALESCE"
ENV_EXCLUDE = "WATCHRUN_EXCLUDE"

_TRUE_VALUES = ("1", "true", "yes", "on")


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def env_paths(name: str) -> List[str]:
    """Read an ``os.pathsep`` separated list of paths from the environment."""
    value = os.environ.get(name, "")
    return [p for p in value.split(os.pathsep) if p]


@dataclass(frozen=True)
class RunOptions:
    """
    How reactions are run.

    Attributes:
        wait: Block the watch loop until the reaction command exits
        coalesce: Collapse a batch of simultaneous events into one reaction
    """
    wait: bool = False
    coalesce: bool = False


@dataclass
class WatchConfig:
    """
    Parsed configuration for a watchrun session.

    Attributes:
        command: Argv of the reaction command; argv[0] is looked up on PATH
        watch_entries: Files or directories to watch (default: cwd)
        exclude_entries: Paths to skip, compared after canonicalization
        wait: See RunOptions.wait
        coalesce: See RunOptions.coalesce
        verbose: Enable debug logging
    """
    command: List[str] = field(default_factory=list)
    watch_entries: List[str] = field(default_factory=list)
    exclude_entries: List[str] = field(default_factory=list)
    wait: bool = False
    coalesce: bool = False
    verbose: bool = False

    @property
    def options(self) -> RunOptions:
        return RunOptions(wait=self.wait, coalesce=self.coalesce)

    def validate(self) -> None:
        """
        Check the configuration before anything is started.

        Raises:
            ConfigError: If no command was given
        """
        if not self.command:
            raise ConfigError("no command.")
        if not self.command[0]:
            raise ConfigError("command name must not be empty")

    @classmethod
    def from_env(cls, **overrides) -> "WatchConfig":
        """
        Build a config whose defaults come from WATCHRUN_* variables.

        Explicit keyword arguments win over the environment, except for
        exclude entries, where the environment list is prepended.
        """
        config = cls(
            wait=env_flag(ENV_WAIT),
            coalesce=env_flag(ENV_COALESCE),
            exclude_entries=env_paths(ENV_EXCLUDE),
        )
        for key, value in overrides.items():
            if key == "exclude_entries":
                config.exclude_entries = config.exclude_entries + list(value)
            else:
                setattr(config, key, value)
        return config
