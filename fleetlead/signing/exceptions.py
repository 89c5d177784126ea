class AuthenticationError(Exception):
    """Raised when a submission signature is missing, stale or wrong."""
