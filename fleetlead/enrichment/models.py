from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompanySearchInput:
    """What we know about a company when looking it up at the vendor."""

    name: str
    state: str = ""
    website: str = ""
    industries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class VendorCompany:
    id: int
    name: str = ""


@dataclass(frozen=True)
class CompanySearchResult:
    total_results: int
    companies: list[VendorCompany] = field(default_factory=list)


@dataclass(frozen=True)
class VendorContact:
    """A person returned by the vendor contact search (no contact channels)."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    job_title: str | None = None


@dataclass(frozen=True)
class IndustryCode:
    id: str
    name: str = ""


@dataclass(frozen=True)
class EnrichedContact:
    """A person after enrichment, including firmographics of their employer."""

    id: int
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    job_title: str | None = None
    email: str | None = None
    phone: str | None = None
    mobile_phone: str | None = None
    company_revenue: int | None = None
    sic_codes: list[IndustryCode] = field(default_factory=list)
    naics_codes: list[IndustryCode] = field(default_factory=list)

    @property
    def best_phone(self) -> str | None:
        return self.mobile_phone or self.phone or None

    @property
    def is_reachable(self) -> bool:
        return bool(self.email or self.phone or self.mobile_phone)


@dataclass(frozen=True)
class Firmographics:
    revenue: int | None = None
    sic_codes: str | None = None
    naics_codes: str | None = None
    primary_industry: str | None = None
