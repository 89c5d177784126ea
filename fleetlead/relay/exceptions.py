class RelayError(Exception):
    """Raised when an e-mail cannot be forwarded to the ingestion endpoint."""
