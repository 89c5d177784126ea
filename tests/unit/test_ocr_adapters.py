import io
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from fleetlead.config.settings import Settings
from fleetlead.ocr.exceptions import OcrError
from fleetlead.ocr.factory import OcrEngineFactory
from fleetlead.ocr.tesseract_adapter import TesseractOcrAdapter
from fleetlead.ocr.vision_adapter import VisionOcrAdapter


def _png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), color="white").save(buf, format="PNG")
    return buf.getvalue()


class TestTesseractOcrAdapter:
    @patch("fleetlead.ocr.tesseract_adapter.pytesseract.image_to_string")
    def test_returns_stripped_text(self, mock_ocr: MagicMock) -> None:
        mock_ocr.return_value = "  ABC PLUMBING \n"
        assert TesseractOcrAdapter().extract_text(_png()) == "ABC PLUMBING"
        mock_ocr.assert_called_once()

    def test_unreadable_image(self) -> None:
        with pytest.raises(OcrError, match="Cannot open image"):
            TesseractOcrAdapter().extract_text(b"not an image")


class TestOcrEngineFactory:
    def test_vision(self) -> None:
        engine = OcrEngineFactory.create(Settings(ocr_engine="vision", vision_api_key="k"))
        assert isinstance(engine, VisionOcrAdapter)

    def test_tesseract(self) -> None:
        engine = OcrEngineFactory.create(Settings(ocr_engine="TESSERACT"))
        assert isinstance(engine, TesseractOcrAdapter)

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown OCR engine"):
            OcrEngineFactory.create(Settings(ocr_engine="abbyy"))
