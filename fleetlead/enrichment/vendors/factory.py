import httpx

from fleetlead.config.settings import Settings
from fleetlead.database.repositories.vendor_token_repository import VendorTokenRepository
from fleetlead.enrichment.vendors.base import BaseVendorClient
from fleetlead.enrichment.vendors.example_vendor import ExampleVendorClient
from fleetlead.enrichment.vendors.zoominfo_auth import ZoomInfoAuthManager
from fleetlead.enrichment.vendors.zoominfo_client import ZoomInfoClient


class VendorClientFactory:
    """Creates the configured enrichment vendor client."""

    PROVIDERS = ("example", "zoominfo")

    @classmethod
    def create(
        cls,
        settings: Settings,
        token_repo: VendorTokenRepository | None = None,
    ) -> BaseVendorClient:
        provider = settings.vendor_provider.lower()
        if provider == "example":
            return ExampleVendorClient()
        if provider == "zoominfo":
            http_client = httpx.Client(timeout=settings.zoominfo_timeout_seconds)
            auth = ZoomInfoAuthManager(
                token_repo=token_repo or VendorTokenRepository(),
                http_client=http_client,
                base_url=settings.zoominfo_base_url,
                username=settings.zoominfo_username,
                password=settings.zoominfo_password,
            )
            return ZoomInfoClient(
                auth=auth,
                http_client=http_client,
                base_url=settings.zoominfo_base_url,
                retry_attempts=settings.zoominfo_retry_attempts,
            )
        raise ValueError(
            f"Unknown vendor provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
