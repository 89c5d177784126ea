from abc import ABC, abstractmethod

from fleetlead.database.models import QueueMessage
from fleetlead.worker.batch import ItemResult


class BaseQueueHandler(ABC):
    """Processes messages from one work queue."""

    @property
    @abstractmethod
    def queue_name(self) -> str:
        """Queue this handler consumes."""

    @abstractmethod
    def handle(self, message: QueueMessage) -> ItemResult:
        """Process one message and settle it (delete or archive).

        Raises:
            Exception: anything unexpected; the runner then calls on_error.
        """

    @abstractmethod
    def on_error(self, message: QueueMessage, exc: Exception) -> None:
        """Record the failure and settle the message."""
