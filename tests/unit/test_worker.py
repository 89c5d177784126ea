from unittest.mock import MagicMock, patch

import psycopg

from fleetlead.queue.exceptions import QueueError
from fleetlead.worker.batch import BatchReport, ItemResult
from fleetlead.worker.worker import Worker


def _make_worker() -> tuple[Worker, MagicMock]:
    """Create a Worker with a mocked consumer."""
    consumer = MagicMock()
    consumer.queue_name = "image-processing"
    settings = MagicMock(worker_poll_interval_seconds=1)
    return Worker(consumer, settings), consumer


def _report(count: int = 1) -> BatchReport:
    return BatchReport([ItemResult(i, True, "done") for i in range(count)])


class TestWorkerLoop:
    def test_runs_batches_until_interrupted(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.side_effect = [_report(), _report(2), KeyboardInterrupt]

        worker.run()

        assert consumer.run_once.call_count == 3

    def test_stops_after_max_batches(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.return_value = _report()

        worker.run(max_batches=2)

        assert consumer.run_once.call_count == 2


class TestWorkerSleep:
    def test_sleeps_when_queue_is_empty(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.side_effect = [BatchReport(), KeyboardInterrupt]

        with patch("fleetlead.worker.worker.time.sleep") as mock_sleep:
            worker.run()

        mock_sleep.assert_called_once_with(1)

    def test_does_not_sleep_after_full_batch(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.side_effect = [_report(), KeyboardInterrupt]

        with patch("fleetlead.worker.worker.time.sleep") as mock_sleep:
            worker.run()

        mock_sleep.assert_not_called()


class TestWorkerResilience:
    def test_database_error_sleeps_and_retries(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.side_effect = [
            psycopg.OperationalError("connection lost"),
            QueueError("bad queue row"),
            KeyboardInterrupt,
        ]

        with patch("fleetlead.worker.worker.time.sleep") as mock_sleep:
            worker.run()

        assert mock_sleep.call_count == 2

    def test_handles_keyboard_interrupt(self) -> None:
        worker, consumer = _make_worker()
        consumer.run_once.side_effect = KeyboardInterrupt

        worker.run()  # Should not raise
