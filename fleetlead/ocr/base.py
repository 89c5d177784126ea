from abc import ABC, abstractmethod


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def extract_text(self, image_bytes: bytes) -> str:
        """Extract the visible text from an image.

        Args:
            image_bytes: Raw still image content (JPEG, PNG or WebP).

        Returns:
            The detected text, possibly empty when nothing legible was found.

        Raises:
            OcrError: if the provider fails for any reason.
        """
