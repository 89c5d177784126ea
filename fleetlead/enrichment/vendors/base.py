from abc import ABC, abstractmethod
from collections.abc import Sequence

from fleetlead.enrichment.models import (
    CompanySearchInput,
    CompanySearchResult,
    EnrichedContact,
    VendorCompany,
    VendorContact,
)
from fleetlead.logging.logger import Log


class BaseVendorClient(ABC):
    """Contract for contact-enrichment vendors."""

    @abstractmethod
    def search_companies(self, params: dict[str, str]) -> CompanySearchResult:
        """Run one company search with vendor filter names as keys.

        Raises:
            VendorError: on any vendor failure.
        """

    @abstractmethod
    def search_contacts(self, vendor_company_id: int) -> list[VendorContact]:
        """List the people the vendor knows at a company."""

    @abstractmethod
    def enrich_contacts(self, person_ids: Sequence[int]) -> list[EnrichedContact]:
        """Fetch contact channels and employer firmographics for people."""

    def progressive_company_search(self, search: CompanySearchInput) -> VendorCompany | None:
        """Search with progressively more filters until exactly one company matches.

        Strategies, each dropping blank filters: name; name and state; plus
        website; plus industry keywords. No result moves on, exactly one
        result is returned, and several results on the last strategy return
        the first. A failing strategy moves on unless it is the last one.
        """
        strategies = [
            {"companyName": search.name},
            {"companyName": search.name, "state": search.state},
            {
                "companyName": search.name,
                "state": search.state,
                "companyWebsite": search.website,
            },
            {
                "companyName": search.name,
                "state": search.state,
                "companyWebsite": search.website,
                "industryKeywords": ",".join(search.industries),
            },
        ]
        last = len(strategies) - 1
        for index, strategy in enumerate(strategies):
            params = {key: value for key, value in strategy.items() if value}
            try:
                result = self.search_companies(params)
            except Exception as exc:
                if index == last:
                    raise
                Log.warning(f"Company search strategy {index + 1} failed: {exc}")
                continue

            if result.total_results == 0 or not result.companies:
                Log.debug(f"Company search strategy {index + 1} returned no results")
                continue
            if result.total_results == 1:
                return result.companies[0]
            if index == last:
                Log.info(
                    f"Final search strategy returned {result.total_results} results, "
                    "taking the first"
                )
                return result.companies[0]
            Log.debug(
                f"Company search strategy {index + 1} returned {result.total_results} "
                "results, narrowing"
            )
        return None
