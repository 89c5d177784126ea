from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx

from fleetlead.database.repositories.vendor_token_repository import VendorTokenRepository
from fleetlead.enrichment.exceptions import VendorAuthError, VendorNetworkError
from fleetlead.logging.logger import Log

VENDOR_NAME = "zoominfo"
TOKEN_TTL = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ZoomInfoAuthManager:
    """Hands out a bearer JWT, reusing the cached one until it expires.

    Tokens live in the database so every worker process shares one.
    """

    def __init__(
        self,
        *,
        token_repo: VendorTokenRepository,
        http_client: httpx.Client,
        base_url: str,
        username: str,
        password: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._token_repo = token_repo
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._password = password
        self._clock = clock

    def get_valid_token(self) -> str:
        cached = self._token_repo.find_valid(VENDOR_NAME)
        if cached:
            return cached
        return self._request_new_token()

    def _request_new_token(self) -> str:
        if not self._username or not self._password:
            raise VendorAuthError("ZoomInfo credentials are not configured")
        try:
            response = self._client.post(
                f"{self._base_url}/authenticate",
                json={"username": self._username, "password": self._password},
            )
        except httpx.TransportError as exc:
            raise VendorNetworkError(f"ZoomInfo authentication network error: {exc}") from exc

        if response.status_code >= 400:
            raise VendorAuthError(f"ZoomInfo authentication failed: {response.status_code}")
        try:
            token = response.json().get("jwt")
        except ValueError as exc:
            raise VendorAuthError("ZoomInfo authentication returned invalid JSON") from exc

        if not isinstance(token, str) or not _looks_like_jwt(token):
            raise VendorAuthError("ZoomInfo authentication returned a malformed token")

        self._token_repo.save(VENDOR_NAME, token, self._clock() + TOKEN_TTL)
        Log.info("Obtained new ZoomInfo access token")
        return token


def _looks_like_jwt(token: str) -> bool:
    parts = token.split(".")
    return len(parts) == 3 and all(parts)
