from abc import ABC, abstractmethod


class BaseImageStorage(ABC):
    """Contract for all image storage adapters."""

    @abstractmethod
    def save(self, key: str, content: bytes, content_type: str) -> str:
        """Store bytes under ``key`` and return the stored path.

        Raises:
            StorageError: if the object cannot be written.
        """

    @abstractmethod
    def load(self, key: str) -> bytes:
        """Read the bytes stored under ``key``.

        Raises:
            ImageNotFoundError: if nothing is stored under the key.
            StorageError: on any other read failure.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object. Missing objects are ignored."""
