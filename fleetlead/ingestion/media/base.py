from abc import ABC, abstractmethod


class BaseMediaConverter(ABC):
    """Contract for turning non-still attachments into JPEG images."""

    @abstractmethod
    def extract_frame(self, video_bytes: bytes, filename: str) -> bytes:
        """Return a representative JPEG frame from a video.

        Raises:
            MediaConversionError: if no frame can be produced.
        """

    @abstractmethod
    def convert_heic(self, heic_bytes: bytes, filename: str) -> bytes:
        """Transcode a HEIC/HEIF image to JPEG.

        Raises:
            MediaConversionError: if the image cannot be converted.
        """
