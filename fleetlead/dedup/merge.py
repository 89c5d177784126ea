"""Company matching and merge rules.

Matching priority is normalized name, then normalized e-mail, then
normalized phone. A matched company whose status is ``sent`` is never
modified. Otherwise list fields are unioned and scalar fields are only
filled in when currently blank.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from fleetlead.database.models import CompanyRecord, CompanyStatus
from fleetlead.dedup.normalize import (
    normalize_company_name,
    normalize_email,
    normalize_industries,
    normalize_phone,
)

ALREADY_CONTACTED = "already contacted"


class UpsertOutcome(str, Enum):
    INSERTED = "inserted"
    MERGED = "merged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CompanyCandidate:
    """Company fields extracted from a single photo."""

    name: str
    email: str = ""
    phone: str = ""
    industry: list[str] = field(default_factory=list)
    city: str = ""
    state: str = ""
    website: str = ""

    def match_keys(self) -> "MatchKeys":
        return MatchKeys(
            name=normalize_company_name(self.name),
            email=normalize_email(self.email),
            phone=normalize_phone(self.phone),
        )


@dataclass(frozen=True)
class MatchKeys:
    name: str
    email: str
    phone: str

    def lock_keys(self) -> list[str]:
        """Advisory lock keys for every non-empty match key, in a stable order."""
        keys = [
            f"company:name:{self.name}" if self.name else "",
            f"company:email:{self.email}" if self.email else "",
            f"company:phone:{self.phone}" if self.phone else "",
        ]
        return sorted(k for k in keys if k)


@dataclass(frozen=True)
class UpsertResult:
    company_id: str
    outcome: UpsertOutcome
    reason: str | None = None
    needs_enrichment: bool = False


@dataclass
class CompanyChanges:
    """Column values to write when merging into an existing company."""

    email: list[str]
    phone: list[str]
    industry: list[str]
    city: str
    state: str
    website: str
    status: str | None
    changed: bool = False


def find_match(companies: Iterable[CompanyRecord], keys: MatchKeys) -> CompanyRecord | None:
    """Pick the existing company a candidate belongs to, honouring key priority."""
    rows = list(companies)
    if keys.name:
        for row in rows:
            if row.normalized_name == keys.name:
                return row
    if keys.email:
        for row in rows:
            if keys.email in {normalize_email(e) for e in row.email}:
                return row
    if keys.phone:
        for row in rows:
            if keys.phone in {normalize_phone(p) for p in row.phone}:
                return row
    return None


def is_skipped(existing: CompanyRecord) -> bool:
    return existing.status == CompanyStatus.SENT


def _fill_blank(current: str | None, incoming: str) -> str:
    current = current or ""
    incoming = (incoming or "").strip()
    if not current.strip() and incoming:
        return incoming
    return current


def plan_merge(existing: CompanyRecord, candidate: CompanyCandidate) -> CompanyChanges:
    """Compute merged column values; ``changed`` is False when nothing differs."""
    email = list(existing.email)
    new_email = normalize_email(candidate.email)
    if new_email and new_email not in {normalize_email(e) for e in email}:
        email.append(new_email)

    phone = list(existing.phone)
    new_phone = normalize_phone(candidate.phone)
    if new_phone and new_phone not in {normalize_phone(p) for p in phone}:
        phone.append(new_phone)

    industry = normalize_industries(list(existing.industry) + list(candidate.industry))

    status = existing.status or CompanyStatus.ENRICHING

    changes = CompanyChanges(
        email=email,
        phone=phone,
        industry=industry,
        city=_fill_blank(existing.city, candidate.city),
        state=_fill_blank(existing.state, candidate.state),
        website=_fill_blank(existing.website, candidate.website),
        status=status,
    )
    changes.changed = (
        changes.email != list(existing.email)
        or changes.phone != list(existing.phone)
        or changes.industry != list(existing.industry)
        or changes.city != (existing.city or "")
        or changes.state != (existing.state or "")
        or changes.website != (existing.website or "")
        or changes.status != existing.status
    )
    return changes


def build_new_company(company_id: str, candidate: CompanyCandidate) -> CompanyRecord:
    """Row for a candidate that matched nothing."""
    email = normalize_email(candidate.email)
    phone = normalize_phone(candidate.phone)
    return CompanyRecord(
        id=company_id,
        name=candidate.name.strip(),
        normalized_name=normalize_company_name(candidate.name),
        email=[email] if email else [],
        phone=[phone] if phone else [],
        industry=normalize_industries(candidate.industry),
        city=(candidate.city or "").strip(),
        state=(candidate.state or "").strip(),
        website=(candidate.website or "").strip(),
        status=CompanyStatus.ENRICHING,
    )
