from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class PhotoStatus:
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class CompanyStatus:
    ENRICHING = "enriching"
    NOT_FOUND = "not_found"
    NO_EXECS = "no_execs"
    CONTACTS_FAILED = "contacts_failed"
    LOW_REVENUE = "low_revenue"
    PROCESSED = "processed"
    ERROR = "error"
    SENT = "sent"


class ContactStatus:
    NON_EXECUTIVE = "non-executive"
    NO_CONTACT = "no_contact"
    GENERATING_MESSAGE = "generating_message"


@dataclass
class PhotoRecord:
    """Represents a row from the photos table."""

    id: str
    storage_path: str
    status: str
    company_id: str | None = None
    submitted_by: str | None = None
    location: str | None = None
    created_at: datetime | None = None


@dataclass
class CompanyRecord:
    """Represents a row from the companies table."""

    id: str
    name: str
    normalized_name: str
    email: list[str] = field(default_factory=list)
    phone: list[str] = field(default_factory=list)
    industry: list[str] = field(default_factory=list)
    city: str = ""
    state: str = ""
    website: str = ""
    revenue: int | None = None
    sic_codes: str | None = None
    naics_codes: str | None = None
    primary_industry: str | None = None
    zoominfo_id: int | None = None
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ContactRecord:
    """Represents a row from the contacts table."""

    company_id: str
    zoominfo_id: int
    status: str
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    id: str | None = None
    email_subject: str | None = None
    email_body: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()


@dataclass
class QueueMessage:
    """A message claimed from a work queue."""

    msg_id: int
    message: dict[str, Any]
    read_ct: int = 0
    enqueued_at: datetime | None = None
    vt: datetime | None = None
