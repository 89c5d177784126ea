from fleetlead.database.models import QueueMessage
from fleetlead.logging.logger import Log
from fleetlead.worker.batch import ItemResult
from fleetlead.worker.handler import BaseQueueHandler


class JobRunner:
    """Run one message through a handler and catch every exception."""

    def __init__(self, handler: BaseQueueHandler) -> None:
        self._handler = handler

    def run(self, message: QueueMessage) -> ItemResult:
        """Execute a single message with error handling. Never raises."""
        Log.info(
            "Running message",
            queue=self._handler.queue_name,
            msg_id=message.msg_id,
            read_ct=message.read_ct,
        )
        try:
            result = self._handler.handle(message)
        except Exception as exc:
            return self._handle_failure(message, exc)
        Log.info("Message finished", msg_id=message.msg_id, outcome=result.outcome)
        return result

    def _handle_failure(self, message: QueueMessage, exc: Exception) -> ItemResult:
        Log.exception(f"Message {message.msg_id} failed: {exc}")
        try:
            self._handler.on_error(message, exc)
        except Exception as cleanup_exc:
            Log.exception(
                f"Error handling for message {message.msg_id} also failed: {cleanup_exc}"
            )
        return ItemResult(
            msg_id=message.msg_id,
            succeeded=False,
            outcome="error",
            error=str(exc),
        )
