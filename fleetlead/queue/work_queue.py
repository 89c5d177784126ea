"""At-least-once work queue stored in PostgreSQL, one table per queue.

A read claims up to ``max_count`` visible messages with ``FOR UPDATE SKIP
LOCKED`` and pushes their visible-at timestamp (``vt``) forward by the
visibility timeout. A consumer that dies before ``delete``/``archive`` simply
lets the timestamp lapse and the message is handed out again.
"""

import re
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from fleetlead.database.connection import get_connection
from fleetlead.database.models import QueueMessage
from fleetlead.queue.exceptions import InvalidQueueNameError, QueueError

_QUEUE_NAME_RE = re.compile(r"^[a-z][a-z0-9_-]{0,46}$")


def queue_table(queue_name: str) -> sql.Identifier:
    """Table holding live messages for a queue."""
    return sql.Identifier(f"queue_{_table_suffix(queue_name)}")


def archive_table(queue_name: str) -> sql.Identifier:
    """Table holding archived messages for a queue."""
    return sql.Identifier(f"archive_{_table_suffix(queue_name)}")


def _table_suffix(queue_name: str) -> str:
    if not _QUEUE_NAME_RE.match(queue_name):
        raise InvalidQueueNameError(f"Invalid queue name: {queue_name!r}")
    return queue_name.replace("-", "_")


class WorkQueue:
    """send / read / delete / archive over per-queue tables."""

    @contextmanager
    def _connection(
        self, conn: psycopg.Connection[Any] | None
    ) -> Generator[tuple[psycopg.Connection[Any], bool], None, None]:
        if conn is not None:
            yield conn, False
            return
        with get_connection() as owned:
            yield owned, True

    def create_queue(self, queue_name: str) -> None:
        """Create the live and archive tables for a queue if missing."""
        live = queue_table(queue_name)
        archived = archive_table(queue_name)
        with get_connection() as conn:
            conn.execute(
                sql.SQL(
                    """
                    CREATE TABLE IF NOT EXISTS {live} (
                        msg_id BIGSERIAL PRIMARY KEY,
                        read_ct INTEGER NOT NULL DEFAULT 0,
                        enqueued_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                        vt TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                        message JSONB NOT NULL
                    )
                    """
                ).format(live=live)
            )
            conn.execute(
                sql.SQL(
                    """
                    CREATE TABLE IF NOT EXISTS {archived} (
                        msg_id BIGINT PRIMARY KEY,
                        read_ct INTEGER NOT NULL DEFAULT 0,
                        enqueued_at TIMESTAMPTZ NOT NULL,
                        archived_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                        vt TIMESTAMPTZ NOT NULL,
                        message JSONB NOT NULL
                    )
                    """
                ).format(archived=archived)
            )
            conn.commit()

    def send(
        self,
        queue_name: str,
        message: dict[str, Any],
        sleep_seconds: int = 0,
        conn: psycopg.Connection[Any] | None = None,
    ) -> list[int]:
        """Enqueue one message and return its id in a list.

        When ``conn`` is given the insert joins the caller's transaction and
        is not committed here.
        """
        return self.send_batch(queue_name, [message], sleep_seconds, conn=conn)

    def send_batch(
        self,
        queue_name: str,
        messages: Sequence[dict[str, Any]],
        sleep_seconds: int = 0,
        conn: psycopg.Connection[Any] | None = None,
    ) -> list[int]:
        """Enqueue several messages, returning ids in input order."""
        if not messages:
            return []
        query = sql.SQL(
            """
            INSERT INTO {table} (vt, message)
            VALUES (NOW() + make_interval(secs => %s), %s)
            RETURNING msg_id
            """
        ).format(table=queue_table(queue_name))
        ids: list[int] = []
        with self._connection(conn) as (active, owned):
            with active.cursor() as cur:
                for message in messages:
                    cur.execute(query, (sleep_seconds, Jsonb(message)))
                    row = cur.fetchone()
                    if row is None:
                        raise QueueError(f"Send to {queue_name} returned no message id")
                    ids.append(int(row[0]))
            if owned:
                active.commit()
        return ids

    def read(
        self,
        queue_name: str,
        visibility_timeout_seconds: int,
        max_count: int,
    ) -> list[QueueMessage]:
        """Claim up to ``max_count`` visible messages, hiding them for the timeout."""
        table = queue_table(queue_name)
        query = sql.SQL(
            """
            WITH claimable AS (
                SELECT msg_id
                FROM {table}
                WHERE vt <= NOW()
                ORDER BY msg_id
                LIMIT %s
                FOR UPDATE SKIP LOCKED
            )
            UPDATE {table} AS q
            SET vt = NOW() + make_interval(secs => %s),
                read_ct = q.read_ct + 1
            FROM claimable
            WHERE q.msg_id = claimable.msg_id
            RETURNING q.msg_id, q.read_ct, q.enqueued_at, q.vt, q.message
            """
        ).format(table=table)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (max_count, visibility_timeout_seconds))
                rows = cur.fetchall()
            conn.commit()

        messages = [
            QueueMessage(
                msg_id=row["msg_id"],
                message=row["message"],
                read_ct=row["read_ct"],
                enqueued_at=row["enqueued_at"],
                vt=row["vt"],
            )
            for row in rows
        ]
        return sorted(messages, key=lambda m: m.msg_id)

    def delete(self, queue_name: str, msg_id: int) -> bool:
        """Permanently remove a message. Returns False if it was already gone."""
        query = sql.SQL("DELETE FROM {table} WHERE msg_id = %s").format(
            table=queue_table(queue_name)
        )
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (msg_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def archive(self, queue_name: str, msg_id: int) -> bool:
        """Move a message into the archive table. Returns False if it was already gone."""
        query = sql.SQL(
            """
            WITH moved AS (
                DELETE FROM {live}
                WHERE msg_id = %s
                RETURNING msg_id, read_ct, enqueued_at, vt, message
            )
            INSERT INTO {archived} (msg_id, read_ct, enqueued_at, vt, message)
            SELECT msg_id, read_ct, enqueued_at, vt, message FROM moved
            """
        ).format(live=queue_table(queue_name), archived=archive_table(queue_name))
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (msg_id,))
                archived = cur.rowcount > 0
            conn.commit()
        return archived
