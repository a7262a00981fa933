"""Custom exceptions for the watchrun package."""


class WatchRunError(Exception):
    """Base exception for all watchrun errors."""
    pass


class ConfigError(WatchRunError):
    """Configuration is invalid (e.g. no command given)."""
    pass


class ResolveError(WatchRunError):
    """A watch entry could not be resolved to something watchable."""
    pass


class UnsupportedFileTypeError(ResolveError):
    """Watch entry is neither a regular file nor a directory."""
    pass


class TraversalError(WatchRunError):
    """A directory could not be opened during the tree walk."""
    pass


class RegistrationError(WatchRunError):
    """A watch target could not be registered for notifications."""
    pass


class EventWaitError(WatchRunError):
    """Waiting for filesystem events failed."""
    pass


class SpawnError(WatchRunError):
    """The reaction command could not be spawned."""
    pass
