from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from httpx import Response

from fleetlead.config.settings import Settings
from fleetlead.ingestion.api import create_app
from fleetlead.ingestion.exceptions import (
    AttachmentValidationError,
    MediaConversionError,
    TransientInfraError,
)
from fleetlead.ingestion.gateway import Submission
from fleetlead.ingestion.models import IngestionResult
from fleetlead.signing.exceptions import AuthenticationError


@pytest.fixture()
def gateway() -> MagicMock:
    mock = MagicMock()
    mock.ingest.return_value = IngestionResult(paths=["uploads/vehicle_1.jpg"])
    return mock


@pytest.fixture()
def client(settings: Settings, gateway: MagicMock) -> TestClient:
    return TestClient(create_app(settings, gateway=gateway))


def _post(client: TestClient, **kwargs: Any) -> Response:
    return client.post(
        "/ingest",
        headers={"X-Timestamp": "123", "X-Signature": "abc"},
        files=[
            ("file1", ("a.jpg", b"first", "image/jpeg")),
            ("file2", ("b.png", b"second", "image/png")),
        ],
        **kwargs,
    )


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestIngest:
    def test_success_response(self, client: TestClient) -> None:
        response = _post(client)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "paths": ["uploads/vehicle_1.jpg"],
            "count": 1,
        }

    def test_builds_submission_from_request(self, client: TestClient, gateway: MagicMock) -> None:
        _post(client, data={"sender_email": "bob@example.com", "location": "Austin, TX"})

        submission = gateway.ingest.call_args.args[0]
        assert isinstance(submission, Submission)
        assert [a.filename for a in submission.attachments] == ["a.jpg", "b.png"]
        assert [a.content for a in submission.attachments] == [b"first", b"second"]
        assert [a.content_type for a in submission.attachments] == ["image/jpeg", "image/png"]
        assert submission.timestamp == "123"
        assert submission.signature == "abc"
        assert submission.sender_email == "bob@example.com"
        assert submission.location == "Austin, TX"

    def test_missing_optional_fields_are_none(self, client: TestClient, gateway: MagicMock) -> None:
        _post(client)

        submission = gateway.ingest.call_args.args[0]
        assert submission.sender_email is None
        assert submission.location is None


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (AuthenticationError("Invalid signature"), 401),
            (AttachmentValidationError("No attachments provided"), 400),
            (TransientInfraError("Failed to store image"), 500),
            (MediaConversionError("converter down"), 500),
        ],
    )
    def test_maps_errors_to_status(
        self, client: TestClient, gateway: MagicMock, exc: Exception, status: int
    ) -> None:
        gateway.ingest.side_effect = exc

        response = _post(client)

        assert response.status_code == status
        assert response.json() == {"error": str(exc)}
