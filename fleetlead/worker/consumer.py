from concurrent.futures import ThreadPoolExecutor

from fleetlead.logging.logger import Log
from fleetlead.queue.work_queue import WorkQueue
from fleetlead.worker.batch import BatchReport
from fleetlead.worker.handler import BaseQueueHandler
from fleetlead.worker.job_runner import JobRunner


class QueueConsumer:
    """Reads one batch and settles every message in it concurrently.

    Each message runs through the JobRunner, so one failure never affects
    its siblings.
    """

    def __init__(
        self,
        work_queue: WorkQueue,
        handler: BaseQueueHandler,
        *,
        batch_size: int,
        visibility_timeout: int,
        job_runner: JobRunner | None = None,
    ) -> None:
        self._work_queue = work_queue
        self._handler = handler
        self._job_runner = job_runner or JobRunner(handler)
        self._batch_size = batch_size
        self._visibility_timeout = visibility_timeout

    @property
    def queue_name(self) -> str:
        return self._handler.queue_name

    def run_once(self) -> BatchReport:
        messages = self._work_queue.read(
            self.queue_name, self._visibility_timeout, self._batch_size
        )
        if not messages:
            return BatchReport()

        with ThreadPoolExecutor(max_workers=len(messages)) as pool:
            results = list(pool.map(self._job_runner.run, messages))

        report = BatchReport(results)
        Log.info(
            "Batch settled",
            queue=self.queue_name,
            succeeded=report.success_count,
            failed=report.failure_count,
        )
        return report
