"""Forwards photos attached to an inbound e-mail to the ingestion endpoint.

The relay sits on the sending side of the trust boundary: it signs exactly
the bytes it posts, sender address first, so the gateway can verify them.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from email import message_from_bytes, policy
from email.message import EmailMessage
from email.utils import parseaddr

import httpx

from fleetlead.config.settings import Settings
from fleetlead.ingestion.mime import resolve_media_type, sniff_mime
from fleetlead.logging.logger import Log
from fleetlead.relay.exceptions import RelayError
from fleetlead.signing.signer import RequestSigner, SignedPart, build_signature_payload


@dataclass
class RelayedEmail:
    sender_email: str | None
    parts: list[SignedPart] = field(default_factory=list)


def extract_attachments(
    raw_message: bytes,
    *,
    max_attachments: int,
    sniff: Callable[[bytes], str] = sniff_mime,
) -> RelayedEmail:
    """Pull supported photo and video attachments out of a raw RFC 822 message.

    Unsupported files are skipped and at most ``max_attachments`` are kept,
    in message order. The content type is the sniffed one.
    """
    message = message_from_bytes(raw_message, policy=policy.default)
    if not isinstance(message, EmailMessage):
        raise RelayError("Could not parse e-mail message")
    _, sender = parseaddr(str(message.get("From", "")))

    relayed = RelayedEmail(sender_email=sender.strip().lower() or None)
    for index, part in enumerate(message.iter_attachments(), start=1):
        content = part.get_payload(decode=True)
        if not isinstance(content, bytes) or not content:
            continue
        media = resolve_media_type(sniff(content))
        filename = part.get_filename() or f"attachment-{index}"
        if media is None:
            Log.info(f"Skipping unsupported attachment '{filename}'")
            continue
        relayed.parts.append(SignedPart(filename, media.mime, content))
        if len(relayed.parts) >= max_attachments:
            break
    return relayed


class EmailRelay:
    def __init__(
        self,
        *,
        signer: RequestSigner,
        ingest_url: str,
        http_client: httpx.Client,
        max_attachments: int = 5,
        sniff: Callable[[bytes], str] = sniff_mime,
    ) -> None:
        self._signer = signer
        self._ingest_url = ingest_url
        self._client = http_client
        self._max_attachments = max_attachments
        self._sniff = sniff

    def forward(self, raw_message: bytes) -> dict[str, object]:
        """Sign and POST the attachments of one e-mail; return the gateway response.

        Raises:
            RelayError: no usable attachments, network failure, or a non-2xx reply.
        """
        relayed = extract_attachments(
            raw_message, max_attachments=self._max_attachments, sniff=self._sniff
        )
        if not relayed.parts:
            raise RelayError("E-mail has no supported attachments")

        headers = self._signer.sign(
            build_signature_payload(relayed.parts, sender_email=relayed.sender_email)
        )
        data = {"sender_email": relayed.sender_email} if relayed.sender_email else {}
        files = [
            ("files", (part.filename, part.content, part.content_type))
            for part in relayed.parts
        ]

        try:
            response = self._client.post(
                self._ingest_url, headers=headers, data=data, files=files
            )
        except httpx.HTTPError as exc:
            raise RelayError(f"Could not reach ingestion endpoint: {exc}") from exc

        if response.status_code >= 400:
            raise RelayError(
                f"Ingestion endpoint rejected the e-mail: {response.status_code} {response.text}"
            )
        Log.info(f"Relayed {len(relayed.parts)} attachment(s) to ingestion")
        return response.json()


def build_relay(settings: Settings) -> EmailRelay:
    return EmailRelay(
        signer=RequestSigner(settings.webhook_secret),
        ingest_url=settings.relay_ingest_url,
        http_client=httpx.Client(timeout=settings.relay_timeout_seconds),
        max_attachments=settings.max_attachments,
    )
