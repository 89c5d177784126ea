from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from fleetlead.config.settings import Settings
from fleetlead.logging.logger import Log

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        application_name="fleetlead",
    )


def init_pool(settings: Settings) -> None:
    """Open the process-wide pool shared by every repository and the work queue.

    Worker threads each borrow their own connection, so the pool must be at
    least as large as the batch size of the worker that opens it.
    """
    global _pool  # noqa: PLW0603
    max_size = max(
        settings.db_pool_max_size,
        settings.extraction_batch_size,
        settings.enrichment_batch_size,
    )
    _pool = ConnectionPool(
        build_conninfo(settings),
        min_size=1,
        max_size=max_size,
        check=ConnectionPool.check_connection,
        open=True,
    )
    Log.info("Database pool opened", host=settings.db_host, max_size=max_size)


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is None:
        return
    _pool.close()
    _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Borrow a pooled connection; the caller commits."""
    if _pool is None:
        raise RuntimeError("Database pool is not open; call init_pool() at startup")
    with _pool.connection() as conn:
        yield conn
