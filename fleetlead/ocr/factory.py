from fleetlead.config.settings import Settings
from fleetlead.ocr.base import BaseOcrEngine
from fleetlead.ocr.tesseract_adapter import TesseractOcrAdapter
from fleetlead.ocr.vision_adapter import VisionOcrAdapter


class OcrEngineFactory:
    """Creates the correct OCR engine based on settings."""

    ENGINES = ("vision", "tesseract")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "vision":
            return VisionOcrAdapter(
                api_url=settings.vision_api_url,
                api_key=settings.vision_api_key,
                timeout_seconds=settings.vision_timeout_seconds,
            )
        if engine == "tesseract":
            return TesseractOcrAdapter()
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
