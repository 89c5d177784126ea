class ExtractionError(Exception):
    """Raised when a photo yields no usable company details."""
