class ParsingError(Exception):
    """Raised when OCR text cannot be parsed into company fields."""


class ParsingValidationError(ParsingError):
    """Raised when the parsed result has the wrong shape."""


class ParsingNetworkError(ParsingError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
