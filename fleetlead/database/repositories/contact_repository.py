import uuid

from psycopg.rows import dict_row

from fleetlead.database.connection import get_connection
from fleetlead.database.exceptions import RepositoryError
from fleetlead.database.models import ContactRecord


class ContactRepository:
    """Database operations for the contacts table."""

    def upsert_by_vendor_id(self, contact: ContactRecord) -> str:
        """Insert a contact or update the row with the same vendor id.

        Returns the contact row id. Re-running enrichment for a company never
        duplicates a contact because ``zoominfo_id`` is unique.
        A contact that already has a generated message keeps its status.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO contacts
                        (id, company_id, first_name, middle_name, last_name, name,
                         title, email, phone, zoominfo_id, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (zoominfo_id) DO UPDATE
                    SET company_id = EXCLUDED.company_id,
                        first_name = EXCLUDED.first_name,
                        middle_name = EXCLUDED.middle_name,
                        last_name = EXCLUDED.last_name,
                        name = EXCLUDED.name,
                        title = EXCLUDED.title,
                        email = EXCLUDED.email,
                        phone = EXCLUDED.phone,
                        status = CASE
                            WHEN contacts.email_body IS NOT NULL THEN contacts.status
                            ELSE EXCLUDED.status
                        END,
                        updated_at = NOW()
                    RETURNING id
                    """,
                    (
                        contact.id or str(uuid.uuid4()),
                        contact.company_id,
                        contact.first_name,
                        contact.middle_name,
                        contact.last_name,
                        contact.name,
                        contact.title,
                        contact.email,
                        contact.phone,
                        contact.zoominfo_id,
                        contact.status,
                    ),
                )
                row = cur.fetchone()
            if row is None:
                raise RepositoryError(
                    f"Contact upsert for vendor id {contact.zoominfo_id} returned no row"
                )
            conn.commit()
        return str(row[0])

    def find_by_company(self, company_id: str) -> list[ContactRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, company_id, first_name, middle_name, last_name, title,
                           email, phone, zoominfo_id, status, email_subject,
                           email_body, created_at, updated_at
                    FROM contacts
                    WHERE company_id = %s
                    ORDER BY created_at
                    """,
                    (company_id,),
                )
                rows = cur.fetchall()

        return [
            ContactRecord(
                id=str(row["id"]),
                company_id=str(row["company_id"]),
                first_name=row["first_name"],
                middle_name=row["middle_name"],
                last_name=row["last_name"],
                title=row["title"],
                email=row["email"],
                phone=row["phone"],
                zoominfo_id=row["zoominfo_id"],
                status=row["status"],
                email_subject=row["email_subject"],
                email_body=row["email_body"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]
