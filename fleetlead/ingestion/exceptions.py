class IngestionError(Exception):
    """Base exception for ingestion failures."""


class AttachmentValidationError(IngestionError):
    """Raised when attachment count, type or size is rejected."""


class TransientInfraError(IngestionError):
    """Raised when storage, database or a collaborator fails transiently."""


class MediaConversionError(TransientInfraError):
    """Raised when a video or HEIC attachment cannot be turned into a still image."""
