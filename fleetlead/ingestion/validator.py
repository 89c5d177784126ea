"""Attachment validation run before anything is stored."""

from collections.abc import Callable, Sequence

from fleetlead.ingestion.exceptions import AttachmentValidationError
from fleetlead.ingestion.mime import resolve_media_type, sniff_mime
from fleetlead.ingestion.models import AcceptedAttachment, IncomingAttachment


def validate_attachments(
    attachments: Sequence[IncomingAttachment],
    *,
    max_count: int,
    max_bytes: int,
    sniff: Callable[[bytes], str] = sniff_mime,
) -> list[AcceptedAttachment]:
    """Check count, size and sniffed type of every attachment.

    The whole submission is rejected if any attachment fails, so a request
    never ends up partially stored.

    Raises:
        AttachmentValidationError: describing the first failing attachment.
    """
    if not attachments:
        raise AttachmentValidationError("No attachments provided")
    if len(attachments) > max_count:
        raise AttachmentValidationError(
            f"Too many attachments: {len(attachments)} (max {max_count})"
        )

    accepted: list[AcceptedAttachment] = []
    for index, attachment in enumerate(attachments):
        size = len(attachment.content)
        if size == 0:
            raise AttachmentValidationError(f"Attachment {index} is empty")
        if size > max_bytes:
            raise AttachmentValidationError(
                f"Attachment {index} is too large: {size} bytes (max {max_bytes})"
            )
        detected = sniff(attachment.content)
        media = resolve_media_type(detected)
        if media is None:
            raise AttachmentValidationError(
                f"Attachment {index} has unsupported type '{detected}'"
            )
        accepted.append(
            AcceptedAttachment(
                filename=attachment.filename,
                content=attachment.content,
                media=media,
            )
        )
    return accepted
