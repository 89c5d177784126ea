class VendorError(Exception):
    """Raised when the enrichment vendor fails or returns an unusable payload."""


class VendorAuthError(VendorError):
    """Raised when the vendor rejects or cannot issue credentials."""


class VendorNetworkError(VendorError):
    """Raised on network failures, rate limiting and vendor-side 5xx errors."""
