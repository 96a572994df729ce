"""Storage failure types."""


class StorageError(Exception):
    """Base class for persistence failures."""


class LocalStorageError(StorageError):
    """Raised when the local fallback store cannot be read or written."""


class StorageUnavailableError(StorageError):
    """Raised when both the remote store and the local fallback failed."""
