from fleetlead.config.settings import Settings
from fleetlead.ingestion.media.base import BaseMediaConverter
from fleetlead.ingestion.media.cloudinary_converter import CloudinaryMediaConverter
from fleetlead.ingestion.media.unavailable_converter import UnavailableMediaConverter


class MediaConverterFactory:
    """Creates the configured media converter."""

    SUPPORTED = ("none", "cloudinary")

    @classmethod
    def create(cls, settings: Settings) -> BaseMediaConverter:
        converter = settings.media_converter.lower()
        if converter == "none":
            return UnavailableMediaConverter()
        if converter == "cloudinary":
            return CloudinaryMediaConverter(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                timeout_seconds=settings.cloudinary_timeout_seconds,
            )
        raise ValueError(
            f"Unknown media converter '{converter}'. Choose from: {list(cls.SUPPORTED)}"
        )
