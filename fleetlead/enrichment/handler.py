"""Contact-enrichment queue handler.

Company state machine: enriching -> not_found | contacts_failed | no_execs |
low_revenue | processed | error. A company already ``sent`` is never touched
again, even when it is contacted while enrichment runs. A company that has
vanished is archived, any unexpected failure marks the company ``error`` and
archives the message.
"""

import uuid

from fleetlead.config.settings import Settings
from fleetlead.database.exceptions import CompanyNotFoundError
from fleetlead.database.models import (
    CompanyRecord,
    CompanyStatus,
    ContactRecord,
    ContactStatus,
    QueueMessage,
)
from fleetlead.database.repositories.company_repository import CompanyRepository
from fleetlead.database.repositories.contact_repository import ContactRepository
from fleetlead.database.repositories.vendor_token_repository import VendorTokenRepository
from fleetlead.dedup.merge import ALREADY_CONTACTED
from fleetlead.enrichment.classifier import is_executive
from fleetlead.enrichment.firmographics import resolve_final_status, summarize_firmographics
from fleetlead.enrichment.models import CompanySearchInput, EnrichedContact, VendorContact
from fleetlead.enrichment.vendors.base import BaseVendorClient
from fleetlead.enrichment.vendors.factory import VendorClientFactory
from fleetlead.logging.logger import Log
from fleetlead.queue.work_queue import WorkQueue
from fleetlead.worker.batch import ItemResult
from fleetlead.worker.handler import BaseQueueHandler


def _company_id(raw: object) -> str | None:
    if raw is None:
        return None
    try:
        return str(uuid.UUID(str(raw)))
    except ValueError:
        return None


def _vendor_id(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


class EnrichmentHandler(BaseQueueHandler):
    def __init__(
        self,
        *,
        settings: Settings,
        work_queue: WorkQueue,
        company_repo: CompanyRepository,
        contact_repo: ContactRepository,
        vendor: BaseVendorClient,
    ) -> None:
        self._settings = settings
        self._work_queue = work_queue
        self._company_repo = company_repo
        self._contact_repo = contact_repo
        self._vendor = vendor

    @property
    def queue_name(self) -> str:
        return self._settings.enrichment_queue_name

    def handle(self, message: QueueMessage) -> ItemResult:
        company_id = _company_id(message.message.get("company_id"))
        company = self._company_repo.find_by_id(company_id) if company_id else None
        if company is None:
            Log.warning(
                f"Company {message.message.get('company_id')} not found, "
                f"archiving message {message.msg_id}"
            )
            self._work_queue.archive(self.queue_name, message.msg_id)
            return ItemResult(message.msg_id, False, "company_not_found")
        if company.status == CompanyStatus.SENT:
            Log.info(f"Company {company.id} already contacted, skipping enrichment")
            self._work_queue.delete(self.queue_name, message.msg_id)
            return ItemResult(message.msg_id, True, ALREADY_CONTACTED)

        status = self._enrich(company, _vendor_id(message.message.get("zoominfo_id")))
        self._work_queue.delete(self.queue_name, message.msg_id)
        return ItemResult(message.msg_id, True, status)

    def _enrich(self, company: CompanyRecord, vendor_company_id: int | None) -> str:
        Log.info(f"Enriching company {company.id}")

        # Step 1: Resolve the vendor company
        if vendor_company_id is None:
            match = self._vendor.progressive_company_search(
                CompanySearchInput(
                    name=company.name,
                    state=company.state,
                    website=company.website,
                    industries=list(company.industry),
                )
            )
            if match is None:
                return self._finish(company, CompanyStatus.NOT_FOUND)
            vendor_company_id = match.id
        Log.info(f"Company {company.id} resolved to vendor company {vendor_company_id}")

        # Step 2: Fetch contacts
        contacts = self._vendor.search_contacts(vendor_company_id)
        if not contacts:
            return self._finish(company, CompanyStatus.CONTACTS_FAILED, vendor_company_id)

        # Step 3: Classify, store non-executives without enriching them
        executives = [c for c in contacts if is_executive(c.job_title)]
        for contact in contacts:
            if not is_executive(contact.job_title):
                self._store_non_executive(company.id, contact)
        Log.info(
            f"Company {company.id}: {len(executives)} executive(s) "
            f"of {len(contacts)} contact(s)"
        )
        if not executives:
            return self._finish(company, CompanyStatus.NO_EXECS, vendor_company_id)

        # Step 4: Enrich and store executives
        enriched = self._vendor.enrich_contacts([c.id for c in executives])
        eligible = [c for c in enriched if self._store_enriched(company.id, c)]

        # Step 5: Firmographics and final status
        firmographics = summarize_firmographics(enriched)
        status = resolve_final_status(firmographics.revenue, self._settings.min_company_revenue)
        updated = self._company_repo.record_enrichment(
            company.id,
            status=status,
            zoominfo_id=vendor_company_id,
            revenue=firmographics.revenue,
            sic_codes=firmographics.sic_codes,
            naics_codes=firmographics.naics_codes,
            primary_industry=firmographics.primary_industry,
        )
        if not updated:
            return ALREADY_CONTACTED

        # Step 6: Hand reachable executives to message generation
        for contact in eligible:
            self._work_queue.send(
                self._settings.email_queue_name, {"contact_zoominfo_id": contact.id}
            )
        Log.info(
            f"Company {company.id} enriched: {status}, "
            f"{len(eligible)} contact(s) queued for messaging"
        )
        return status

    def _finish(
        self,
        company: CompanyRecord,
        status: str,
        vendor_company_id: int | None = None,
    ) -> str:
        if not self._company_repo.update_status(
            company.id, status, zoominfo_id=vendor_company_id
        ):
            return ALREADY_CONTACTED
        Log.info(f"Company {company.id} finished enrichment: {status}")
        return status

    def _store_non_executive(self, company_id: str, contact: VendorContact) -> None:
        self._contact_repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=contact.id,
                status=ContactStatus.NON_EXECUTIVE,
                first_name=contact.first_name,
                last_name=contact.last_name,
                title=contact.job_title,
            )
        )

    def _store_enriched(self, company_id: str, contact: EnrichedContact) -> bool:
        """Upsert an enriched contact. Returns True if it can be messaged."""
        status = (
            ContactStatus.GENERATING_MESSAGE if contact.is_reachable else ContactStatus.NO_CONTACT
        )
        self._contact_repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=contact.id,
                status=status,
                first_name=contact.first_name,
                middle_name=contact.middle_name,
                last_name=contact.last_name,
                title=contact.job_title,
                email=contact.email,
                phone=contact.best_phone,
            )
        )
        return status == ContactStatus.GENERATING_MESSAGE

    def on_error(self, message: QueueMessage, exc: Exception) -> None:
        company_id = _company_id(message.message.get("company_id"))
        if company_id:
            try:
                self._company_repo.update_status(company_id, CompanyStatus.ERROR)
            except CompanyNotFoundError:
                Log.warning(f"Company {company_id} vanished before it could be marked error")
        Log.error(
            f"Enrichment of company {company_id} failed ({type(exc).__name__}), "
            f"archiving message {message.msg_id}"
        )
        self._work_queue.archive(self.queue_name, message.msg_id)


def build_enrichment_handler(settings: Settings) -> EnrichmentHandler:
    """Build an EnrichmentHandler with all required adapters."""
    return EnrichmentHandler(
        settings=settings,
        work_queue=WorkQueue(),
        company_repo=CompanyRepository(),
        contact_repo=ContactRepository(),
        vendor=VendorClientFactory.create(settings, VendorTokenRepository()),
    )
