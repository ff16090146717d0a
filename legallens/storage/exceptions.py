class StorageError(Exception):
    """Base exception for all local store errors."""


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the store's byte quota."""


class StorageCorruptionError(StorageError):
    """Raised when a stored blob cannot be read or parsed."""
