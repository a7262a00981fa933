"""
watchrun

Watches files and directories for modification and runs a command in
response ("rebuild on save").

Features:
- Recursive directory expansion with exact-path exclusion
- Symlink-cycle safe tree walk and canonical-path deduplication
- Modification notifications via watchdog
- Optional coalescing of simultaneous changes into one reaction
- Wait-for-completion or double-fork detached reaction commands
"""

from .models import (
    ChangeEvent,
    ExcludeSet,
    FileKind,
    Reaction,
    SpawnState,
    WatchTarget,
    canonicalize,
)

from .config import RunOptions, WatchConfig

from .exceptions import (
    WatchRunError,
    ConfigError,
    ResolveError,
    UnsupportedFileTypeError,
    TraversalError,
    RegistrationError,
    EventWaitError,
    SpawnError,
)

from .matcher import is_excluded
from .walker import TreeWalker
from .resolver import WatchSetResolver
from .fs_watcher import FSEventSource, FSEventHandler
from .runner import CommandRunner
from .reactor import EventReactor
from .process import WatchRunProcess


__all__ = [
    # Models
    "ChangeEvent",
    "ExcludeSet",
    "FileKind",
    "Reaction",
    "SpawnState",
    "WatchTarget",
    "canonicalize",
    # Config
    "RunOptions",
    "WatchConfig",
    # Exceptions
    "WatchRunError",
    "ConfigError",
    "ResolveError",
    "UnsupportedFileTypeError",
    "TraversalError",
    "RegistrationError",
    "EventWaitError",
    "SpawnError",
    # Components
    "is_excluded",
    "TreeWalker",
    "WatchSetResolver",
    "FSEventSource",
    "FSEventHandler",
    "CommandRunner",
    "EventReactor",
    # Main Process
    "WatchRunProcess",
]

__version__ = "0.1.0"
