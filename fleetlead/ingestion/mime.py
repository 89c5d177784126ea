"""Content-based MIME detection for incoming attachments.

The declared ``Content-Type`` of a part is never trusted; the type comes from
libmagic looking at the leading bytes.
"""

import magic

from fleetlead.ingestion.models import MediaKind, MediaType

# libmagic needs a few KB to recognise ISO media containers reliably.
_SNIFF_BYTES = 8192

JPEG = MediaType("image/jpeg", "jpg", MediaKind.IMAGE)
PNG = MediaType("image/png", "png", MediaKind.IMAGE)
WEBP = MediaType("image/webp", "webp", MediaKind.IMAGE)
HEIC = MediaType("image/heic", "heic", MediaKind.HEIC)
MP4 = MediaType("video/mp4", "mp4", MediaKind.VIDEO)
MOV = MediaType("video/quicktime", "mov", MediaKind.VIDEO)

SUPPORTED_MEDIA: dict[str, MediaType] = {
    "image/jpeg": JPEG,
    "image/jpg": JPEG,
    "image/pjpeg": JPEG,
    "image/png": PNG,
    "image/webp": WEBP,
    "image/heic": HEIC,
    "image/heif": HEIC,
    "image/heic-sequence": HEIC,
    "image/heif-sequence": HEIC,
    "video/mp4": MP4,
    "video/x-m4v": MP4,
    "video/quicktime": MOV,
    "video/mov": MOV,
}


def sniff_mime(content: bytes) -> str:
    """Return the MIME type libmagic detects for ``content``."""
    if not content:
        return "application/x-empty"
    return magic.from_buffer(content[:_SNIFF_BYTES], mime=True).lower()


def resolve_media_type(mime: str) -> MediaType | None:
    """Map a detected MIME type onto a supported media type, or None."""
    return SUPPORTED_MEDIA.get(mime.strip().lower())
