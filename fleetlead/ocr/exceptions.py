class OcrError(Exception):
    """Raised when text cannot be extracted from an image."""


class OcrNetworkError(OcrError):
    """Raised when the OCR provider call fails due to network/infrastructure issues."""
