from collections.abc import Sequence

from fleetlead.database.models import CompanyStatus
from fleetlead.enrichment.models import EnrichedContact, Firmographics, IndustryCode


def _join_ids(codes: Sequence[IndustryCode]) -> str | None:
    ids = [code.id for code in codes if code.id]
    return ",".join(ids) if ids else None


def _most_specific(codes: Sequence[IndustryCode]) -> IndustryCode | None:
    """The longest code wins; the first one seen wins ties."""
    best: IndustryCode | None = None
    for code in codes:
        if best is None or len(code.id) > len(best.id):
            best = code
    return best


def summarize_firmographics(contacts: Sequence[EnrichedContact]) -> Firmographics:
    """Company-level fields taken from the first enriched contact."""
    if not contacts:
        return Firmographics()
    first = contacts[0]
    primary = _most_specific(first.naics_codes)
    return Firmographics(
        revenue=first.company_revenue or None,
        sic_codes=_join_ids(first.sic_codes),
        naics_codes=_join_ids(first.naics_codes),
        primary_industry=(primary.name or None) if primary else None,
    )


def resolve_final_status(revenue: int | None, min_revenue: int) -> str:
    if revenue is not None and revenue < min_revenue:
        return CompanyStatus.LOW_REVENUE
    return CompanyStatus.PROCESSED
