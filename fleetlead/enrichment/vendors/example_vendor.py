"""Offline vendor adapter for local runs. No network calls."""

from collections.abc import Sequence

from fleetlead.enrichment.models import (
    CompanySearchResult,
    EnrichedContact,
    IndustryCode,
    VendorCompany,
    VendorContact,
)
from fleetlead.enrichment.vendors.base import BaseVendorClient

EXAMPLE_COMPANY_ID = 1000001


class ExampleVendorClient(BaseVendorClient):
    """Every search finds one company with an owner and a sales associate."""

    CONTACTS = (
        VendorContact(id=2000001, first_name="Pat", last_name="Example", job_title="Owner"),
        VendorContact(
            id=2000002, first_name="Sam", last_name="Sample", job_title="Sales Associate"
        ),
    )

    def search_companies(self, params: dict[str, str]) -> CompanySearchResult:
        name = params.get("companyName", "")
        return CompanySearchResult(
            total_results=1,
            companies=[VendorCompany(id=EXAMPLE_COMPANY_ID, name=name)],
        )

    def search_contacts(self, vendor_company_id: int) -> list[VendorContact]:
        _ = vendor_company_id
        return list(self.CONTACTS)

    def enrich_contacts(self, person_ids: Sequence[int]) -> list[EnrichedContact]:
        by_id = {contact.id: contact for contact in self.CONTACTS}
        return [
            EnrichedContact(
                id=person_id,
                first_name=by_id[person_id].first_name,
                last_name=by_id[person_id].last_name,
                job_title=by_id[person_id].job_title,
                email=f"contact{person_id}@example.com",
                company_revenue=5_000_000,
                sic_codes=[IndustryCode("1711", "Plumbing, Heating and Air-Conditioning")],
                naics_codes=[
                    IndustryCode("23", "Construction"),
                    IndustryCode("238220", "Plumbing, Heating, and Air-Conditioning Contractors"),
                ],
            )
            for person_id in person_ids
            if person_id in by_id
        ]
