import uuid
from datetime import datetime, timedelta, timezone

import pytest

from fleetlead.database.connection import get_connection
from fleetlead.database.exceptions import PhotoNotFoundError
from fleetlead.database.models import ContactRecord, ContactStatus, PhotoStatus
from fleetlead.database.repositories.company_repository import CompanyRepository
from fleetlead.database.repositories.contact_repository import ContactRepository
from fleetlead.database.repositories.photo_repository import PhotoRepository
from fleetlead.database.repositories.vendor_token_repository import VendorTokenRepository
from fleetlead.dedup.merge import CompanyCandidate


def _company_id(name: str = "Photo Co") -> str:
    return CompanyRepository().upsert_company(CompanyCandidate(name=name)).company_id


@pytest.mark.integration
class TestPhotoRepository:
    def test_insert_commits_with_caller(self) -> None:
        repo = PhotoRepository()
        with get_connection() as conn:
            photo = repo.insert(
                conn, "uploads/a.jpg", submitted_by="d@fleet.test", location="Austin"
            )
            conn.commit()

        found = repo.find_by_path("uploads/a.jpg")
        assert found is not None
        assert found.id == photo.id
        assert found.status == PhotoStatus.UPLOADED
        assert found.submitted_by == "d@fleet.test"

    def test_insert_rolled_back_with_caller(self) -> None:
        repo = PhotoRepository()
        with get_connection() as conn:
            repo.insert(conn, "uploads/b.jpg")
            conn.rollback()
        assert repo.find_by_path("uploads/b.jpg") is None

    def test_status_transitions_and_company_link(self) -> None:
        repo = PhotoRepository()
        with get_connection() as conn:
            photo = repo.insert(conn, "uploads/c.jpg")
            conn.commit()
        company_id = _company_id()

        repo.mark_processing(photo.id)
        repo.mark_processed(photo.id, company_id)

        found = repo.find_by_path("uploads/c.jpg")
        assert found is not None
        assert found.status == PhotoStatus.PROCESSED
        assert found.company_id == company_id

    def test_mark_failed_missing_photo(self) -> None:
        with pytest.raises(PhotoNotFoundError):
            PhotoRepository().mark_failed(str(uuid.uuid4()))


@pytest.mark.integration
class TestContactRepository:
    def test_upsert_by_vendor_id_updates_in_place(self) -> None:
        repo = ContactRepository()
        company_id = _company_id("Contact Co")
        first_id = repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=900,
                status=ContactStatus.NON_EXECUTIVE,
                first_name="Pat",
                title="Estimator",
            )
        )
        second_id = repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=900,
                status=ContactStatus.GENERATING_MESSAGE,
                first_name="Pat",
                last_name="Lee",
                title="Owner",
                email="pat@contactco.com",
            )
        )

        assert second_id == first_id
        [contact] = repo.find_by_company(company_id)
        assert contact.status == ContactStatus.GENERATING_MESSAGE
        assert contact.title == "Owner"
        assert contact.email == "pat@contactco.com"
        assert contact.name == "Pat Lee"

    def test_messaged_contact_keeps_status(self) -> None:
        repo = ContactRepository()
        company_id = _company_id("Messaged Co")
        repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=901,
                status=ContactStatus.GENERATING_MESSAGE,
                first_name="Pat",
                title="Owner",
                email="pat@messaged.com",
            )
        )
        with get_connection() as conn:
            conn.execute(
                "UPDATE contacts SET email_subject = %s, email_body = %s WHERE zoominfo_id = %s",
                ("Hello", "Hi Pat", 901),
            )
            conn.commit()

        repo.upsert_by_vendor_id(
            ContactRecord(
                company_id=company_id,
                zoominfo_id=901,
                status=ContactStatus.NON_EXECUTIVE,
                first_name="Pat",
                title="Sales Associate",
            )
        )

        [contact] = repo.find_by_company(company_id)
        assert contact.status == ContactStatus.GENERATING_MESSAGE
        assert contact.title == "Sales Associate"
        assert contact.email_body == "Hi Pat"


@pytest.mark.integration
class TestVendorTokenRepository:
    def test_returns_newest_unexpired_token(self) -> None:
        repo = VendorTokenRepository()
        now = datetime.now(timezone.utc)
        repo.save("zoominfo", "old.jwt.token", now + timedelta(minutes=10))
        repo.save("zoominfo", "new.jwt.token", now + timedelta(minutes=50))
        repo.save("zoominfo", "dead.jwt.token", now - timedelta(minutes=1))

        assert repo.find_valid("zoominfo") == "new.jwt.token"
        assert repo.find_valid("other") is None

    def test_expired_only(self) -> None:
        repo = VendorTokenRepository()
        repo.save("zoominfo", "dead.jwt.token", datetime.now(timezone.utc) - timedelta(seconds=1))
        assert repo.find_valid("zoominfo") is None
