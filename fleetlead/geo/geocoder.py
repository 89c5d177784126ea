import httpx

from fleetlead.config.settings import Settings
from fleetlead.geo.models import Coordinates, Place
from fleetlead.logging.logger import Log

_CITY_KEYS = ("city", "town", "village", "hamlet", "municipality", "county")


class ReverseGeocoder:
    """Reverse geocoding against a Nominatim-compatible ``/reverse`` endpoint.

    Lookups are best-effort: any network or payload problem returns None.
    """

    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str,
        timeout_seconds: int = 10,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.Client(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReverseGeocoder | None":
        if not settings.geocoding_enabled:
            return None
        return cls(
            base_url=settings.geocoding_base_url,
            user_agent=settings.geocoding_user_agent,
            timeout_seconds=settings.geocoding_timeout_seconds,
        )

    def reverse(self, coordinates: Coordinates) -> Place | None:
        try:
            response = self._client.get(
                f"{self._base_url}/reverse",
                params={
                    "format": "jsonv2",
                    "lat": coordinates.latitude,
                    "lon": coordinates.longitude,
                    "zoom": 10,
                    "addressdetails": 1,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            Log.warning(f"Reverse geocoding failed: {exc}")
            return None

        address = payload.get("address") if isinstance(payload, dict) else None
        if not isinstance(address, dict):
            return None

        city = next((str(address[k]) for k in _CITY_KEYS if address.get(k)), "")
        state = str(address.get("state") or "")
        if not city and not state:
            return None
        return Place(city=city, state=state)
