import sys
from collections.abc import Callable
from pathlib import Path

import uvicorn

from fleetlead.config.settings import Settings
from fleetlead.database.connection import close_pool, init_pool
from fleetlead.enrichment.handler import build_enrichment_handler
from fleetlead.extraction.handler import build_extraction_handler
from fleetlead.ingestion.api import create_app
from fleetlead.logging.logger import Log
from fleetlead.queue.work_queue import WorkQueue
from fleetlead.relay.email_relay import build_relay
from fleetlead.worker.consumer import QueueConsumer
from fleetlead.worker.handler import BaseQueueHandler
from fleetlead.worker.worker import Worker


def _bootstrap() -> Settings:
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)
    return settings


def api() -> None:
    """Entry point: serve the ingestion HTTP API."""
    settings = _bootstrap()
    try:
        uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)
    finally:
        close_pool()


def _run_worker(
    build_handler: Callable[[Settings], BaseQueueHandler],
    batch_size: Callable[[Settings], int],
    visibility_timeout: Callable[[Settings], int],
) -> None:
    settings = _bootstrap()
    try:
        handler = build_handler(settings)
        consumer = QueueConsumer(
            WorkQueue(),
            handler,
            batch_size=batch_size(settings),
            visibility_timeout=visibility_timeout(settings),
        )
        Worker(consumer, settings).run()
    finally:
        close_pool()


def extraction_worker() -> None:
    """Entry point: consume the image-processing queue."""
    _run_worker(
        build_extraction_handler,
        lambda s: s.extraction_batch_size,
        lambda s: s.extraction_visibility_timeout_seconds,
    )


def enrichment_worker() -> None:
    """Entry point: consume the contact-enrichment queue."""
    _run_worker(
        build_enrichment_handler,
        lambda s: s.enrichment_batch_size,
        lambda s: s.enrichment_visibility_timeout_seconds,
    )


def relay() -> None:
    """Entry point: forward one e-mail (file argument or stdin) to ingestion."""
    settings = Settings()
    Log.configure(settings.log_level)
    raw = Path(sys.argv[1]).read_bytes() if len(sys.argv) > 1 else sys.stdin.buffer.read()
    result = build_relay(settings).forward(raw)
    Log.info(f"Relay accepted: {result}")


if __name__ == "__main__":
    extraction_worker()
