class QueueError(Exception):
    """Base exception for work queue errors."""


class InvalidQueueNameError(QueueError):
    """Raised when a queue name cannot be mapped to a table name."""
