from pathlib import Path

from fleetlead.storage.base import BaseImageStorage
from fleetlead.storage.exceptions import ImageNotFoundError, StorageError


class LocalImageStorage(BaseImageStorage):
    """Stores images on the local filesystem under a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def save(self, key: str, content: bytes, content_type: str) -> str:
        _ = content_type
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Failed to store {key}: {exc}") from exc
        return key

    def load(self, key: str) -> bytes:
        path = self._resolve_path(key)
        if not path.exists():
            raise ImageNotFoundError(f"Image not found: {key}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._resolve_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        root = self._files_root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise StorageError(f"Key escapes storage root: {key}")
        return path
