"""Exception types shared by the syncer and the API."""


class SyncError(Exception):
    """Base class for errors raised by this project."""


class ConfigError(SyncError):
    """Configuration file or value could not be used."""


class CheckpointWriteError(SyncError):
    """The checkpoint could not be persisted; the run must not report success."""
