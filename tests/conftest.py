import pytest

from fleetlead.config.settings import Settings
from tests.fakes import (
    FakeCompanyRepository,
    FakeContactRepository,
    FakePhotoRepository,
    FakeWorkQueue,
    MemoryImageStorage,
)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        webhook_secret="test-secret",
        vendor_provider="example",
        parsing_provider="example",
        min_company_revenue=2_000_000,
    )


@pytest.fixture()
def work_queue() -> FakeWorkQueue:
    return FakeWorkQueue()


@pytest.fixture()
def photo_repo() -> FakePhotoRepository:
    return FakePhotoRepository()


@pytest.fixture()
def company_repo() -> FakeCompanyRepository:
    return FakeCompanyRepository()


@pytest.fixture()
def contact_repo() -> FakeContactRepository:
    return FakeContactRepository()


@pytest.fixture()
def storage() -> MemoryImageStorage:
    return MemoryImageStorage()
