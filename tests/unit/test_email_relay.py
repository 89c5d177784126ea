from email.message import EmailMessage

import httpx
import pytest

from fleetlead.relay.email_relay import EmailRelay, extract_attachments
from fleetlead.relay.exceptions import RelayError
from fleetlead.signing.signer import (
    RequestSigner,
    SignatureVerifier,
    SignedPart,
    build_signature_payload,
)

SECRET = "test-secret"
NOW = 1_700_000_000
INGEST_URL = "http://gateway.test/ingest"

_SNIFFED = {b"JPG": "image/jpeg", b"MP4": "video/mp4", b"TXT": "text/plain"}


def _sniff(content: bytes) -> str:
    return _SNIFFED.get(content[:3], "application/octet-stream")


def _email(
    *attachments: tuple[str | None, bytes],
    sender: str = "Pat Lee <Pat@Acme.com>",
) -> bytes:
    message = EmailMessage()
    if sender:
        message["From"] = sender
    message["To"] = "photos@fleetlead.test"
    message["Subject"] = "Truck spotted"
    message.set_content("See attached.")
    for filename, content in attachments:
        message.add_attachment(
            content, maintype="application", subtype="octet-stream", filename=filename
        )
    return message.as_bytes()


class _Recorder:
    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response


def _relay(recorder: _Recorder, max_attachments: int = 5) -> EmailRelay:
    return EmailRelay(
        signer=RequestSigner(SECRET, clock=lambda: NOW),
        ingest_url=INGEST_URL,
        http_client=httpx.Client(transport=httpx.MockTransport(recorder)),
        max_attachments=max_attachments,
        sniff=_sniff,
    )


class TestExtractAttachments:
    def test_keeps_supported_attachments_in_order(self) -> None:
        raw = _email(("truck.jpg", b"JPG-1"), ("notes.txt", b"TXT-1"), ("clip.mov", b"MP4-1"))
        relayed = extract_attachments(raw, max_attachments=5, sniff=_sniff)
        assert relayed.sender_email == "pat@acme.com"
        assert relayed.parts == [
            SignedPart("truck.jpg", "image/jpeg", b"JPG-1"),
            SignedPart("clip.mov", "video/mp4", b"MP4-1"),
        ]

    def test_stops_at_max_attachments(self) -> None:
        raw = _email(*[(f"{i}.jpg", f"JPG-{i}".encode()) for i in range(4)])
        relayed = extract_attachments(raw, max_attachments=2, sniff=_sniff)
        assert [p.filename for p in relayed.parts] == ["0.jpg", "1.jpg"]

    def test_unnamed_attachment_gets_generated_name(self) -> None:
        relayed = extract_attachments(_email((None, b"JPG-x")), max_attachments=5, sniff=_sniff)
        assert relayed.parts[0].filename == "attachment-1"

    def test_missing_sender(self) -> None:
        relayed = extract_attachments(
            _email(("a.jpg", b"JPG-a"), sender=""), max_attachments=5, sniff=_sniff
        )
        assert relayed.sender_email is None


class TestEmailRelay:
    def test_posts_signed_multipart(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"status": "ok", "count": 1}))

        result = _relay(recorder).forward(_email(("truck.jpg", b"JPG-truck")))

        assert result == {"status": "ok", "count": 1}
        request = recorder.requests[0]
        assert request.url == INGEST_URL
        assert b'name="sender_email"' in request.content
        assert b'filename="truck.jpg"' in request.content
        assert b"Content-Type: image/jpeg" in request.content

        payload = build_signature_payload(
            [SignedPart("truck.jpg", "image/jpeg", b"JPG-truck")], sender_email="pat@acme.com"
        )
        SignatureVerifier(SECRET, 300, clock=lambda: NOW).verify(
            payload, request.headers["X-Timestamp"], request.headers["X-Signature"]
        )

    def test_no_supported_attachments(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={}))
        with pytest.raises(RelayError, match="no supported attachments"):
            _relay(recorder).forward(_email(("notes.txt", b"TXT-only")))
        assert recorder.requests == []

    def test_gateway_rejection(self) -> None:
        recorder = _Recorder(httpx.Response(401, json={"detail": "Invalid signature"}))
        with pytest.raises(RelayError, match="401"):
            _relay(recorder).forward(_email(("truck.jpg", b"JPG-truck")))

    def test_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        relay = EmailRelay(
            signer=RequestSigner(SECRET, clock=lambda: NOW),
            ingest_url=INGEST_URL,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
            sniff=_sniff,
        )
        with pytest.raises(RelayError, match="Could not reach"):
            relay.forward(_email(("truck.jpg", b"JPG-truck")))
