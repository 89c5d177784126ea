from dataclasses import dataclass, field
from enum import Enum


class MediaKind(str, Enum):
    IMAGE = "image"
    HEIC = "heic"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaType:
    """A supported attachment type and the extension it is stored under."""

    mime: str
    extension: str
    kind: MediaKind


@dataclass(frozen=True)
class IncomingAttachment:
    """One file part exactly as it arrived in the request."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class AcceptedAttachment:
    """An attachment that passed validation, with its sniffed type."""

    filename: str
    content: bytes
    media: MediaType


@dataclass(frozen=True)
class StillImage:
    """Image bytes ready for storage."""

    content: bytes
    media: MediaType
    source_filename: str


@dataclass
class IngestionResult:
    paths: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.paths)
