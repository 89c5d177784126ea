"""Cloudinary-backed frame extraction and HEIC conversion.

The source file is uploaded with a signed request, the derived JPEG is
downloaded through a transformation URL, and the uploaded asset is destroyed
afterwards on a best-effort basis.
"""

import hashlib
import time
from collections.abc import Callable
from typing import Any

import httpx

from fleetlead.ingestion.exceptions import MediaConversionError
from fleetlead.ingestion.media.base import BaseMediaConverter
from fleetlead.logging.logger import Log

_API_BASE_URL = "https://api.cloudinary.com/v1_1"
_DELIVERY_BASE_URL = "https://res.cloudinary.com"

# Frame one second into the clip, delivered as JPEG.
_VIDEO_FRAME_TRANSFORM = "so_1,f_jpg"
_IMAGE_JPEG_TRANSFORM = "f_jpg"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """SHA-1 over the sorted ``key=value`` pairs followed by the API secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryMediaConverter(BaseMediaConverter):
    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout_seconds: int = 60,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not cloud_name or not api_key or not api_secret:
            raise ValueError("Cloudinary cloud name, API key and API secret are required")
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._client = http_client or httpx.Client(timeout=timeout_seconds)
        self._clock = clock

    def extract_frame(self, video_bytes: bytes, filename: str) -> bytes:
        return self._convert(video_bytes, filename, "video", _VIDEO_FRAME_TRANSFORM)

    def convert_heic(self, heic_bytes: bytes, filename: str) -> bytes:
        return self._convert(heic_bytes, filename, "image", _IMAGE_JPEG_TRANSFORM)

    def _convert(
        self, content: bytes, filename: str, resource_type: str, transform: str
    ) -> bytes:
        public_id = self._upload(content, filename, resource_type)
        try:
            return self._download(public_id, resource_type, transform)
        finally:
            self._destroy(public_id, resource_type)

    def _upload(self, content: bytes, filename: str, resource_type: str) -> str:
        timestamp = int(self._clock())
        params = {"timestamp": timestamp}
        data = {
            "api_key": self._api_key,
            "timestamp": str(timestamp),
            "signature": sign_params(params, self._api_secret),
        }
        url = f"{_API_BASE_URL}/{self._cloud_name}/{resource_type}/upload"
        try:
            response = self._client.post(
                url, data=data, files={"file": (filename, content)}
            )
            response.raise_for_status()
            public_id = response.json().get("public_id")
        except (httpx.HTTPError, ValueError) as exc:
            raise MediaConversionError(f"Cloudinary upload failed for '{filename}': {exc}") from exc
        if not public_id:
            raise MediaConversionError(f"Cloudinary upload returned no public_id for '{filename}'")
        Log.debug(f"Uploaded '{filename}' to Cloudinary as {public_id}")
        return str(public_id)

    def _download(self, public_id: str, resource_type: str, transform: str) -> bytes:
        url = (
            f"{_DELIVERY_BASE_URL}/{self._cloud_name}/{resource_type}/upload/"
            f"{transform}/{public_id}.jpg"
        )
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise MediaConversionError(f"Cloudinary derived download failed: {exc}") from exc
        if not response.content:
            raise MediaConversionError("Cloudinary returned an empty derived image")
        return response.content

    def _destroy(self, public_id: str, resource_type: str) -> None:
        timestamp = int(self._clock())
        params = {"public_id": public_id, "timestamp": timestamp}
        data = {
            "public_id": public_id,
            "api_key": self._api_key,
            "timestamp": str(timestamp),
            "signature": sign_params(params, self._api_secret),
        }
        url = f"{_API_BASE_URL}/{self._cloud_name}/{resource_type}/destroy"
        try:
            self._client.post(url, data=data).raise_for_status()
        except httpx.HTTPError as exc:
            Log.warning(f"Cloudinary cleanup failed for {public_id}: {exc}")
