import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from fleetlead.ocr.base import BaseOcrEngine
from fleetlead.ocr.exceptions import OcrError


class TesseractOcrAdapter(BaseOcrEngine):
    """Extracts text locally with Tesseract."""

    def extract_text(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                text = pytesseract.image_to_string(image)
        except (UnidentifiedImageError, OSError) as exc:
            raise OcrError(f"Cannot open image for OCR: {exc}") from exc
        except pytesseract.TesseractError as exc:
            raise OcrError(f"Tesseract failed: {exc}") from exc
        return text.strip()
