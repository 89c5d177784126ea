import time

import psycopg

from fleetlead.config.settings import Settings
from fleetlead.logging.logger import Log
from fleetlead.queue.exceptions import QueueError
from fleetlead.worker.batch import BatchReport
from fleetlead.worker.consumer import QueueConsumer


class Worker:
    """Poll loop: read batch -> settle -> sleep when idle."""

    def __init__(self, consumer: QueueConsumer, settings: Settings) -> None:
        self._consumer = consumer
        self._settings = settings

    def run(self, max_batches: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_batches is set, stop after that many non-empty batches (for testing).
        """
        Log.info(f"Worker started, polling {self._consumer.queue_name}")
        batches_done = 0
        try:
            while True:
                if max_batches is not None and batches_done >= max_batches:
                    break
                report = self._try_run_batch()
                if report is not None and report.results:
                    batches_done += 1
                else:
                    Log.debug("No messages available, sleeping")
                    time.sleep(self._settings.worker_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_run_batch(self) -> BatchReport | None:
        """Attempt to run one batch. Gracefully handle DB errors."""
        try:
            return self._consumer.run_once()
        except (psycopg.Error, QueueError) as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
