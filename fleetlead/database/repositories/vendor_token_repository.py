from datetime import datetime

from fleetlead.database.connection import get_connection


class VendorTokenRepository:
    """Cached vendor access tokens shared across worker invocations."""

    def find_valid(self, vendor: str) -> str | None:
        """Return the newest unexpired token for a vendor, if any."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT token
                    FROM vendor_auth_tokens
                    WHERE vendor = %s AND expires_at > NOW()
                    ORDER BY created_at DESC
                    LIMIT 1
                    """,
                    (vendor,),
                )
                row = cur.fetchone()
        if row is None:
            return None
        return row[0]

    def save(self, vendor: str, token: str, expires_at: datetime) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO vendor_auth_tokens (vendor, token, expires_at)
                VALUES (%s, %s, %s)
                """,
                (vendor, token, expires_at),
            )
            conn.commit()
