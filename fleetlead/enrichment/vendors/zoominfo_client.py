"""ZoomInfo REST adapter: company search, contact search and contact enrich."""

from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from fleetlead.enrichment.exceptions import VendorAuthError, VendorError, VendorNetworkError
from fleetlead.enrichment.models import (
    CompanySearchResult,
    EnrichedContact,
    IndustryCode,
    VendorCompany,
    VendorContact,
)
from fleetlead.enrichment.vendors.base import BaseVendorClient
from fleetlead.enrichment.vendors.zoominfo_auth import ZoomInfoAuthManager
from fleetlead.logging.logger import Log

ENRICH_OUTPUT_FIELDS = [
    "id",
    "firstName",
    "middleName",
    "lastName",
    "email",
    "phone",
    "mobilePhone",
    "jobTitle",
    "jobFunction",
    "managementLevel",
    "contactAccuracyScore",
    "companyRevenueNumeric",
    "companySicCodes",
    "companyNaicsCodes",
    "companyIndustries",
    "lastUpdatedDate",
]

_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _codes(raw: Any) -> list[IndustryCode]:
    if not isinstance(raw, list):
        return []
    return [
        IndustryCode(id=str(item.get("id", "")), name=str(item.get("name") or ""))
        for item in raw
        if isinstance(item, dict) and item.get("id")
    ]


def _revenue(raw: Any) -> int | None:
    try:
        return int(raw) if raw not in (None, "") else None
    except (TypeError, ValueError):
        return None


def parse_enriched_contact(data: dict[str, Any]) -> EnrichedContact:
    company = data.get("company") if isinstance(data.get("company"), dict) else {}
    return EnrichedContact(
        id=int(data["id"]),
        first_name=_optional_str(data.get("firstName")),
        middle_name=_optional_str(data.get("middleName")),
        last_name=_optional_str(data.get("lastName")),
        job_title=_optional_str(data.get("jobTitle")),
        email=_optional_str(data.get("email")),
        phone=_optional_str(data.get("phone")),
        mobile_phone=_optional_str(data.get("mobilePhone")),
        company_revenue=_revenue(company.get("revenueNumeric")),
        sic_codes=_codes(company.get("sicCodes")),
        naics_codes=_codes(company.get("naicsCodes")),
    )


class ZoomInfoClient(BaseVendorClient):
    def __init__(
        self,
        *,
        auth: ZoomInfoAuthManager,
        http_client: httpx.Client,
        base_url: str,
        retry_attempts: int = 3,
        retry_wait: wait_base | None = None,
    ) -> None:
        self._auth = auth
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._retry_attempts = max(1, retry_attempts)
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)

    def search_companies(self, params: dict[str, str]) -> CompanySearchResult:
        payload = self._post("/search/company", params)
        companies = [
            VendorCompany(id=int(item["id"]), name=str(item.get("name") or ""))
            for item in payload.get("data") or []
            if isinstance(item, dict) and item.get("id") is not None
        ]
        total = payload.get("totalResults")
        return CompanySearchResult(
            total_results=int(total) if total is not None else len(companies),
            companies=companies,
        )

    def search_contacts(self, vendor_company_id: int) -> list[VendorContact]:
        payload = self._post("/search/contact", {"companyId": str(vendor_company_id)})
        return [
            VendorContact(
                id=int(item["id"]),
                first_name=_optional_str(item.get("firstName")),
                last_name=_optional_str(item.get("lastName")),
                job_title=_optional_str(item.get("jobTitle")),
            )
            for item in payload.get("data") or []
            if isinstance(item, dict) and item.get("id") is not None
        ]

    def enrich_contacts(self, person_ids: Sequence[int]) -> list[EnrichedContact]:
        if not person_ids:
            return []
        payload = self._post(
            "/enrich/contact",
            {
                "matchPersonInput": [{"personId": person_id} for person_id in person_ids],
                "outputFields": ENRICH_OUTPUT_FIELDS,
            },
        )
        data = payload.get("data")
        results = data.get("result") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise VendorError("ZoomInfo enrich response has no result list")

        enriched: list[EnrichedContact] = []
        for result in results:
            matches = result.get("data") if isinstance(result, dict) else None
            if not matches:
                Log.debug("ZoomInfo enrich returned no match for one person")
                continue
            enriched.append(parse_enriched_contact(matches[0]))
        return enriched

    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception_type(VendorNetworkError),
            reraise=True,
        )
        return retrying(self._post_once, path, body)

    def _post_once(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        token = self._auth.get_valid_token()
        try:
            response = self._client.post(
                f"{self._base_url}{path}",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TransportError as exc:
            raise VendorNetworkError(f"ZoomInfo {path} network error: {exc}") from exc

        if response.status_code == 401:
            raise VendorAuthError(f"ZoomInfo rejected the access token on {path}")
        if response.status_code in _RETRYABLE_STATUSES:
            raise VendorNetworkError(f"ZoomInfo {path} returned {response.status_code}")
        if response.status_code >= 400:
            raise VendorError(f"ZoomInfo {path} returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise VendorError(f"ZoomInfo {path} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise VendorError(f"ZoomInfo {path} returned an unexpected payload")
        return payload
