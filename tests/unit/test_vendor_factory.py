from unittest.mock import MagicMock

import pytest

from fleetlead.config.settings import Settings
from fleetlead.enrichment.models import CompanySearchInput
from fleetlead.enrichment.vendors.base import BaseVendorClient
from fleetlead.enrichment.vendors.example_vendor import EXAMPLE_COMPANY_ID, ExampleVendorClient
from fleetlead.enrichment.vendors.factory import VendorClientFactory
from fleetlead.enrichment.vendors.zoominfo_client import ZoomInfoClient


class TestVendorClientFactory:
    def test_creates_example_client(self) -> None:
        client = VendorClientFactory.create(Settings(vendor_provider="example"))
        assert isinstance(client, ExampleVendorClient)

    def test_creates_zoominfo_client(self) -> None:
        settings = Settings(
            vendor_provider="ZoomInfo",
            zoominfo_username="u",
            zoominfo_password="p",
        )
        client = VendorClientFactory.create(settings, token_repo=MagicMock())
        assert isinstance(client, BaseVendorClient)
        assert isinstance(client, ZoomInfoClient)

    def test_unknown_provider_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unknown vendor provider"):
            VendorClientFactory.create(Settings(vendor_provider="clearbit"))


class TestExampleVendorClient:
    def test_finds_one_company(self) -> None:
        company = ExampleVendorClient().progressive_company_search(
            CompanySearchInput(name="Acme Plumbing")
        )
        assert company is not None
        assert company.id == EXAMPLE_COMPANY_ID
        assert company.name == "Acme Plumbing"

    def test_contacts_include_an_executive(self) -> None:
        titles = [c.job_title for c in ExampleVendorClient().search_contacts(EXAMPLE_COMPANY_ID)]
        assert titles == ["Owner", "Sales Associate"]

    def test_enrich_ignores_unknown_ids(self) -> None:
        enriched = ExampleVendorClient().enrich_contacts([2000001, 42])
        assert len(enriched) == 1
        assert enriched[0].email == "contact2000001@example.com"
        assert enriched[0].company_revenue == 5_000_000
