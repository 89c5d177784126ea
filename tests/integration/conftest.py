import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from fleetlead.config.settings import Settings
from fleetlead.database.connection import build_conninfo, close_pool, get_connection, init_pool

MIGRATION = Path(__file__).resolve().parents[2] / "migrations" / "001_initial_schema.sql"

_TABLES = (
    "contacts",
    "photos",
    "companies",
    "vendor_auth_tokens",
    "queue_image_processing",
    "archive_image_processing",
    "queue_contact_enrichment",
    "archive_contact_enrichment",
    "queue_email_generation",
    "archive_email_generation",
)


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "fleetlead_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3) as conn:
            conn.execute(MIGRATION.read_text(encoding="utf-8"))
            conn.commit()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture(autouse=True)
def clean_tables(integration_pool: None) -> None:
    with get_connection() as conn:
        conn.execute(f"TRUNCATE {', '.join(_TABLES)} RESTART IDENTITY CASCADE")
        conn.commit()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn
