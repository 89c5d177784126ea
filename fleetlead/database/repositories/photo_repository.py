import uuid
from typing import Any

import psycopg
from psycopg.rows import dict_row

from fleetlead.database.connection import get_connection
from fleetlead.database.exceptions import PhotoNotFoundError
from fleetlead.database.models import PhotoRecord, PhotoStatus


class PhotoRepository:
    """Database operations for the photos table."""

    def insert(
        self,
        conn: psycopg.Connection[Any],
        storage_path: str,
        submitted_by: str | None = None,
        location: str | None = None,
    ) -> PhotoRecord:
        """Insert an uploaded photo inside the caller's transaction (no commit)."""
        photo = PhotoRecord(
            id=str(uuid.uuid4()),
            storage_path=storage_path,
            status=PhotoStatus.UPLOADED,
            submitted_by=submitted_by,
            location=location,
        )
        conn.execute(
            """
            INSERT INTO photos (id, storage_path, status, submitted_by, location)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (photo.id, photo.storage_path, photo.status, photo.submitted_by, photo.location),
        )
        return photo

    def find_by_path(self, storage_path: str) -> PhotoRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, storage_path, status, company_id, submitted_by,
                           location, created_at
                    FROM photos
                    WHERE storage_path = %s
                    """,
                    (storage_path,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return PhotoRecord(
            id=str(row["id"]),
            storage_path=row["storage_path"],
            status=row["status"],
            company_id=str(row["company_id"]) if row["company_id"] else None,
            submitted_by=row["submitted_by"],
            location=row["location"],
            created_at=row["created_at"],
        )

    def mark_processing(self, photo_id: str) -> None:
        self._set_status(photo_id, PhotoStatus.PROCESSING)

    def mark_failed(self, photo_id: str) -> None:
        self._set_status(photo_id, PhotoStatus.FAILED)

    def mark_processed(self, photo_id: str, company_id: str) -> None:
        """Link the photo to its company and mark it processed.

        Raises:
            PhotoNotFoundError: if no photo with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE photos
                    SET status = %s, company_id = %s
                    WHERE id = %s
                    """,
                    (PhotoStatus.PROCESSED, company_id, photo_id),
                )
                if cur.rowcount == 0:
                    raise PhotoNotFoundError(f"Photo {photo_id} not found")
            conn.commit()

    def _set_status(self, photo_id: str, status: str) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE photos SET status = %s WHERE id = %s",
                    (status, photo_id),
                )
                if cur.rowcount == 0:
                    raise PhotoNotFoundError(f"Photo {photo_id} not found")
            conn.commit()
