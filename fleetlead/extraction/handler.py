"""Image-processing queue handler: photo -> OCR -> parse -> company upsert.

Photo state machine: uploaded -> processing -> processed | failed. Failures
are final; the message is deleted either way and only crash redelivery
(an expired visibility timeout) runs a photo again.
"""

from pathlib import Path

from fleetlead.config.settings import Settings
from fleetlead.database.models import PhotoRecord, PhotoStatus, QueueMessage
from fleetlead.database.repositories.company_repository import CompanyRepository
from fleetlead.database.repositories.photo_repository import PhotoRepository
from fleetlead.extraction.exceptions import ExtractionError
from fleetlead.geo.geocoder import ReverseGeocoder
from fleetlead.geo.locator import ImageLocator
from fleetlead.logging.logger import Log
from fleetlead.ocr.base import BaseOcrEngine
from fleetlead.ocr.factory import OcrEngineFactory
from fleetlead.parsing import ParserFactory
from fleetlead.parsing.base import BaseCompanyParser
from fleetlead.parsing.models import ParsedCompany
from fleetlead.queue.work_queue import WorkQueue
from fleetlead.storage.base import BaseImageStorage
from fleetlead.storage.local_storage import LocalImageStorage
from fleetlead.worker.batch import ItemResult
from fleetlead.worker.handler import BaseQueueHandler


class ExtractionHandler(BaseQueueHandler):
    def __init__(
        self,
        *,
        settings: Settings,
        work_queue: WorkQueue,
        photo_repo: PhotoRepository,
        company_repo: CompanyRepository,
        storage: BaseImageStorage,
        ocr_engine: BaseOcrEngine,
        parser: BaseCompanyParser,
        locator: ImageLocator | None = None,
    ) -> None:
        self._settings = settings
        self._work_queue = work_queue
        self._photo_repo = photo_repo
        self._company_repo = company_repo
        self._storage = storage
        self._ocr_engine = ocr_engine
        self._parser = parser
        self._locator = locator

    @property
    def queue_name(self) -> str:
        return self._settings.image_queue_name

    def handle(self, message: QueueMessage) -> ItemResult:
        image_path = message.message.get("image_path")
        if not isinstance(image_path, str) or not image_path:
            Log.error(f"Message {message.msg_id} has no image_path, dropping it")
            self._delete(message)
            return ItemResult(message.msg_id, False, "invalid_message", "missing image_path")

        photo = self._photo_repo.find_by_path(image_path)
        if photo is None:
            Log.error(f"No photo recorded for message {message.msg_id}, dropping it")
            self._delete(message)
            return ItemResult(message.msg_id, False, "photo_not_found", image_path)

        if photo.status == PhotoStatus.PROCESSED:
            Log.info(f"Photo {photo.id} already processed, dropping redelivered message")
            self._delete(message)
            return ItemResult(message.msg_id, True, "duplicate")

        outcome = self._process(photo)
        self._delete(message)
        return ItemResult(message.msg_id, True, outcome)

    def _process(self, photo: PhotoRecord) -> str:
        Log.info(f"Processing photo {photo.id}")

        # Step 1: Claim the photo
        self._photo_repo.mark_processing(photo.id)

        # Step 2: Load image bytes
        image_bytes = self._storage.load(photo.storage_path)
        Log.info(f"Loaded {len(image_bytes)} bytes for photo {photo.id}")

        # Step 3: OCR
        text = self._ocr_engine.extract_text(image_bytes)
        if not text.strip():
            raise ExtractionError(f"No text found on photo {photo.id}")
        Log.info(f"Extracted {len(text)} chars from photo {photo.id}")

        # Step 4: Parse company details
        parsed = self._parser.parse(text)
        if not parsed.name.strip():
            raise ExtractionError(f"No company name found on photo {photo.id}")

        # Step 5: Fill a missing city/state from image GPS
        city, state = self._resolve_location(parsed, image_bytes)

        # Step 6: Upsert and hand new companies to enrichment
        result = self._company_repo.upsert_company(parsed.to_candidate(city=city, state=state))
        if result.needs_enrichment:
            self._work_queue.send(
                self._settings.enrichment_queue_name, {"company_id": result.company_id}
            )
            Log.info(f"Queued company {result.company_id} for enrichment")

        # Step 7: Link photo to company
        self._photo_repo.mark_processed(photo.id, result.company_id)
        Log.info(
            f"Photo {photo.id} processed: company {result.company_id} "
            f"({result.outcome.value})"
        )
        return result.outcome.value

    def _resolve_location(self, parsed: ParsedCompany, image_bytes: bytes) -> tuple[str, str]:
        city, state = parsed.city, parsed.state
        if (city and state) or self._locator is None:
            return city, state
        try:
            place = self._locator.locate(image_bytes)
        except Exception as exc:
            Log.warning(f"GPS location lookup failed: {exc}")
            return city, state
        if place is None:
            return city, state
        return city or place.city, state or place.state

    def on_error(self, message: QueueMessage, exc: Exception) -> None:
        image_path = message.message.get("image_path")
        photo = self._photo_repo.find_by_path(image_path) if isinstance(image_path, str) else None
        if photo is not None:
            self._photo_repo.mark_failed(photo.id)
            Log.error(f"Photo {photo.id} marked failed: {type(exc).__name__}")
        self._delete(message)

    def _delete(self, message: QueueMessage) -> None:
        if not self._work_queue.delete(self.queue_name, message.msg_id):
            Log.warning(f"Message {message.msg_id} was already gone from {self.queue_name}")


def build_extraction_handler(settings: Settings) -> ExtractionHandler:
    """Build an ExtractionHandler with all required adapters."""
    return ExtractionHandler(
        settings=settings,
        work_queue=WorkQueue(),
        photo_repo=PhotoRepository(),
        company_repo=CompanyRepository(),
        storage=LocalImageStorage(Path(settings.storage_root)),
        ocr_engine=OcrEngineFactory.create(settings),
        parser=ParserFactory.create(settings),
        locator=ImageLocator(ReverseGeocoder.from_settings(settings)),
    )
