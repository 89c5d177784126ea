from dataclasses import dataclass, field

from fleetlead.dedup.merge import CompanyCandidate


@dataclass(frozen=True)
class ParsedCompany:
    """Company details read off a vehicle. Blank means not visible."""

    name: str = ""
    industry: list[str] = field(default_factory=list)
    email: str = ""
    phone: str = ""
    city: str = ""
    state: str = ""
    website: str = ""

    def to_candidate(self, *, city: str | None = None, state: str | None = None) -> CompanyCandidate:
        """Build the upsert candidate, optionally overriding the location."""
        return CompanyCandidate(
            name=self.name,
            email=self.email,
            phone=self.phone,
            industry=list(self.industry),
            city=city if city is not None else self.city,
            state=state if state is not None else self.state,
            website=self.website,
        )
