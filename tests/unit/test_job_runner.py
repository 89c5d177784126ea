from unittest.mock import MagicMock

from fleetlead.database.models import QueueMessage
from fleetlead.worker.batch import ItemResult
from fleetlead.worker.job_runner import JobRunner


def _make_runner() -> tuple[JobRunner, MagicMock]:
    handler = MagicMock()
    handler.queue_name = "image-processing"
    return JobRunner(handler), handler


def _message(msg_id: int = 1) -> QueueMessage:
    return QueueMessage(msg_id=msg_id, message={"image_path": "uploads/a.jpg"}, read_ct=1)


class TestJobRunnerSuccess:
    def test_returns_handler_result(self) -> None:
        runner, handler = _make_runner()
        expected = ItemResult(msg_id=1, succeeded=True, outcome="inserted")
        handler.handle.return_value = expected

        assert runner.run(_message()) is expected
        handler.on_error.assert_not_called()


class TestJobRunnerFailure:
    def test_exception_calls_on_error_and_reports_failure(self) -> None:
        runner, handler = _make_runner()
        error = RuntimeError("ocr exploded")
        handler.handle.side_effect = error
        message = _message(7)

        result = runner.run(message)

        handler.on_error.assert_called_once_with(message, error)
        assert result == ItemResult(
            msg_id=7, succeeded=False, outcome="error", error="ocr exploded"
        )

    def test_failing_on_error_does_not_raise(self) -> None:
        runner, handler = _make_runner()
        handler.handle.side_effect = ValueError("bad")
        handler.on_error.side_effect = RuntimeError("db down")

        result = runner.run(_message())

        assert result.succeeded is False
        assert result.error == "bad"
