class StorageError(Exception):
    """Base exception for image storage errors."""


class ImageNotFoundError(StorageError):
    """Raised when no object exists under the requested key."""
