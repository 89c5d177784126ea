class RepositoryError(Exception):
    """Base exception for repository errors."""


class CompanyNotFoundError(RepositoryError):
    """Raised when a company row does not exist."""


class PhotoNotFoundError(RepositoryError):
    """Raised when a photo row does not exist."""
