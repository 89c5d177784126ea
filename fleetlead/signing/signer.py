"""HMAC-SHA256 signing shared by the relay and the ingestion gateway.

The signed payload is the optional sender e-mail followed, for each
attachment in order, by ``"{filename}:{content_type}:"`` and the raw bytes.
The signature is ``HMAC-SHA256(secret, payload || str(timestamp))`` rendered
as lowercase hex.
"""

import hashlib
import hmac
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from fleetlead.signing.exceptions import AuthenticationError


@dataclass(frozen=True)
class SignedPart:
    """One attachment as seen by the signer."""

    filename: str
    content_type: str
    content: bytes


def build_signature_payload(
    parts: Iterable[SignedPart],
    sender_email: str | None = None,
) -> bytes:
    """Concatenate sender and attachment bytes in the order they are sent."""
    chunks: list[bytes] = []
    if sender_email:
        chunks.append(sender_email.encode("utf-8"))
    for part in parts:
        chunks.append(f"{part.filename}:{part.content_type}:".encode("utf-8"))
        chunks.append(part.content)
    return b"".join(chunks)


def compute_signature(secret: str, payload: bytes, timestamp: int | str) -> str:
    message = payload + str(timestamp).encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RequestSigner:
    """Produces the ``X-Timestamp`` / ``X-Signature`` header pair."""

    def __init__(self, secret: str, clock: Callable[[], float] = time.time) -> None:
        if not secret:
            raise ValueError("A non-empty signing secret is required")
        self._secret = secret
        self._clock = clock

    def sign(self, payload: bytes) -> dict[str, str]:
        timestamp = int(self._clock())
        return {
            "X-Timestamp": str(timestamp),
            "X-Signature": compute_signature(self._secret, payload, timestamp),
        }


class SignatureVerifier:
    """Verifies signed submissions with a freshness window."""

    def __init__(
        self,
        secret: str,
        max_age_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._max_age_seconds = max_age_seconds
        self._clock = clock

    def verify(
        self,
        payload: bytes,
        timestamp_header: str | None,
        signature_header: str | None,
    ) -> None:
        """Raise AuthenticationError unless the signature is valid and fresh."""
        if not self._secret:
            raise AuthenticationError("Signature verification is not configured")
        if not timestamp_header or not signature_header:
            raise AuthenticationError("Missing signature headers")

        try:
            timestamp = int(timestamp_header.strip())
        except ValueError as exc:
            raise AuthenticationError("Malformed timestamp header") from exc

        if abs(self._clock() - timestamp) > self._max_age_seconds:
            raise AuthenticationError("Request timestamp outside freshness window")

        expected = compute_signature(self._secret, payload, timestamp)
        if not hmac.compare_digest(expected, signature_header.strip().lower()):
            raise AuthenticationError("Invalid signature")
