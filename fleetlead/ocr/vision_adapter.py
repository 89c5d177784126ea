import base64

import httpx

from fleetlead.ocr.base import BaseOcrEngine
from fleetlead.ocr.exceptions import OcrError, OcrNetworkError


class VisionOcrAdapter(BaseOcrEngine):
    """Text detection through the Google Cloud Vision ``images:annotate`` REST API."""

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        timeout_seconds: int = 30,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("vision_api_key is required for ocr_engine=vision")
        self._api_url = api_url
        self._api_key = api_key
        self._client = http_client or httpx.Client(timeout=timeout_seconds)

    def extract_text(self, image_bytes: bytes) -> str:
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }
        try:
            response = self._client.post(
                self._api_url, params={"key": self._api_key}, json=body
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise OcrNetworkError(
                f"Vision API returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrNetworkError(f"Vision API network error: {exc}") from exc
        except ValueError as exc:
            raise OcrError(f"Vision API returned invalid JSON: {exc}") from exc

        responses = payload.get("responses") or []
        if not responses:
            raise OcrError("Vision API returned no responses")
        first = responses[0]
        if "error" in first:
            message = first["error"].get("message", "unknown error")
            raise OcrError(f"Vision API error: {message}")
        annotations = first.get("textAnnotations") or []
        if not annotations:
            return ""
        return str(annotations[0].get("description", "")).strip()
