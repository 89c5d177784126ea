from fleetlead.ingestion.exceptions import MediaConversionError
from fleetlead.ingestion.media.base import BaseMediaConverter


class UnavailableMediaConverter(BaseMediaConverter):
    """Used when no conversion service is configured.

    Still images pass through the gateway untouched; any video or HEIC
    attachment fails the submission with a 5xx so the sender can retry once
    a converter is available.
    """

    def extract_frame(self, video_bytes: bytes, filename: str) -> bytes:
        raise MediaConversionError(f"No media converter configured for video '{filename}'")

    def convert_heic(self, heic_bytes: bytes, filename: str) -> bytes:
        raise MediaConversionError(f"No media converter configured for HEIC '{filename}'")
