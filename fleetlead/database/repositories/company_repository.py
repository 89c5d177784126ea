import uuid
from typing import Any

from psycopg.rows import dict_row

from fleetlead.database.connection import get_connection
from fleetlead.database.exceptions import CompanyNotFoundError
from fleetlead.database.models import CompanyRecord, CompanyStatus
from fleetlead.dedup.merge import (
    ALREADY_CONTACTED,
    CompanyCandidate,
    UpsertOutcome,
    UpsertResult,
    build_new_company,
    find_match,
    is_skipped,
    plan_merge,
)
from fleetlead.logging.logger import Log

_COMPANY_COLUMNS = """
    id, name, normalized_name, email, phone, industry, city, state, website,
    revenue, sic_codes, naics_codes, primary_industry, zoominfo_id, status,
    created_at, updated_at
"""


def _row_to_company(row: dict[str, Any]) -> CompanyRecord:
    return CompanyRecord(
        id=str(row["id"]),
        name=row["name"],
        normalized_name=row["normalized_name"],
        email=list(row["email"] or []),
        phone=list(row["phone"] or []),
        industry=list(row["industry"] or []),
        city=row["city"] or "",
        state=row["state"] or "",
        website=row["website"] or "",
        revenue=row["revenue"],
        sic_codes=row["sic_codes"],
        naics_codes=row["naics_codes"],
        primary_industry=row["primary_industry"],
        zoominfo_id=row["zoominfo_id"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class CompanyRepository:
    """Database operations for the companies table.

    ``upsert_company`` is the only write path for extracted company data.
    """

    def upsert_company(self, candidate: CompanyCandidate) -> UpsertResult:
        """Find-or-create a company and merge the candidate into it.

        Concurrent upserts that share any match key are serialized with
        transaction-scoped advisory locks taken before the lookup, so two
        workers cannot both miss and insert the same company.

        Raises:
            ValueError: if the candidate has no usable name.
        """
        keys = candidate.match_keys()
        if not keys.name:
            raise ValueError("Company name is required for upsert")

        with get_connection() as conn:
            for lock_key in keys.lock_keys():
                conn.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (lock_key,))

            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COMPANY_COLUMNS}
                    FROM companies
                    WHERE normalized_name = %s
                       OR (%s <> '' AND %s = ANY(email))
                       OR (%s <> '' AND %s = ANY(phone))
                    ORDER BY created_at
                    FOR UPDATE
                    """,
                    (keys.name, keys.email, keys.email, keys.phone, keys.phone),
                )
                rows = cur.fetchall()

            existing = find_match([_row_to_company(r) for r in rows], keys)

            if existing is None:
                company = build_new_company(str(uuid.uuid4()), candidate)
                self._insert(conn, company)
                conn.commit()
                Log.info(f"Inserted company {company.id}")
                return UpsertResult(
                    company_id=company.id,
                    outcome=UpsertOutcome.INSERTED,
                    needs_enrichment=True,
                )

            if is_skipped(existing):
                conn.rollback()
                Log.info(f"Skipped upsert for company {existing.id}: {ALREADY_CONTACTED}")
                return UpsertResult(
                    company_id=existing.id,
                    outcome=UpsertOutcome.SKIPPED,
                    reason=ALREADY_CONTACTED,
                )

            changes = plan_merge(existing, candidate)
            if changes.changed:
                conn.execute(
                    """
                    UPDATE companies
                    SET email = %s, phone = %s, industry = %s,
                        city = %s, state = %s, website = %s,
                        status = %s, updated_at = NOW()
                    WHERE id = %s
                    """,
                    (
                        changes.email,
                        changes.phone,
                        changes.industry,
                        changes.city,
                        changes.state,
                        changes.website,
                        changes.status,
                        existing.id,
                    ),
                )
            conn.commit()
            Log.info(f"Merged candidate into company {existing.id}")
            return UpsertResult(
                company_id=existing.id,
                outcome=UpsertOutcome.MERGED,
                needs_enrichment=existing.status is None or existing.status == "",
            )

    @staticmethod
    def _insert(conn: Any, company: CompanyRecord) -> None:
        conn.execute(
            """
            INSERT INTO companies
                (id, name, normalized_name, email, phone, industry,
                 city, state, website, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (
                company.id,
                company.name,
                company.normalized_name,
                company.email,
                company.phone,
                company.industry,
                company.city,
                company.state,
                company.website,
                company.status,
            ),
        )

    def find_by_id(self, company_id: str) -> CompanyRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE id = %s",
                    (company_id,),
                )
                row = cur.fetchone()
        if row is None:
            return None
        return _row_to_company(row)

    def update_status(
        self,
        company_id: str,
        status: str,
        zoominfo_id: int | None = None,
    ) -> bool:
        """Set the company status, and the vendor id when one is known.

        A company already marked ``sent`` is left untouched and False is returned.

        Raises:
            CompanyNotFoundError: if no company with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE companies
                    SET status = %s,
                        zoominfo_id = COALESCE(%s, zoominfo_id),
                        updated_at = NOW()
                    WHERE id = %s AND status IS DISTINCT FROM %s
                    """,
                    (status, zoominfo_id, company_id, CompanyStatus.SENT),
                )
                updated = cur.rowcount > 0
                if not updated:
                    self._require_exists(cur, company_id)
            conn.commit()
        return updated

    def record_enrichment(
        self,
        company_id: str,
        *,
        status: str,
        zoominfo_id: int,
        revenue: int | None,
        sic_codes: str | None,
        naics_codes: str | None,
        primary_industry: str | None,
    ) -> bool:
        """Persist the final enrichment status with firmographics.

        Existing firmographic values are kept when the vendor returned none.
        Returns False, writing nothing, when the company was marked ``sent``
        while it was being enriched.

        Raises:
            CompanyNotFoundError: if no company with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE companies
                    SET status = %s,
                        zoominfo_id = %s,
                        revenue = COALESCE(%s, revenue),
                        sic_codes = COALESCE(%s, sic_codes),
                        naics_codes = COALESCE(%s, naics_codes),
                        primary_industry = COALESCE(%s, primary_industry),
                        updated_at = NOW()
                    WHERE id = %s AND status IS DISTINCT FROM %s
                    """,
                    (
                        status,
                        zoominfo_id,
                        revenue,
                        sic_codes,
                        naics_codes,
                        primary_industry,
                        company_id,
                        CompanyStatus.SENT,
                    ),
                )
                updated = cur.rowcount > 0
                if not updated:
                    self._require_exists(cur, company_id)
            conn.commit()
        return updated

    @staticmethod
    def _require_exists(cur: Any, company_id: str) -> None:
        cur.execute("SELECT 1 FROM companies WHERE id = %s", (company_id,))
        if cur.fetchone() is None:
            raise CompanyNotFoundError(f"Company {company_id} not found")
        Log.info(f"Company {company_id} is already contacted, status left unchanged")
