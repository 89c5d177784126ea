"""Authenticated intake of vehicle photos.

Order of work for one submission: verify the signature, validate every
attachment, turn videos and HEIC files into JPEG stills, store every still,
then record all photo rows together with their extraction jobs in one
transaction. Any storage or database failure removes every stored object, so
a failed request leaves nothing behind.
"""

import uuid
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import psycopg

from fleetlead.config.settings import Settings
from fleetlead.database.connection import get_connection
from fleetlead.database.repositories.photo_repository import PhotoRepository
from fleetlead.geo.geocoder import ReverseGeocoder
from fleetlead.geo.locator import ImageLocator
from fleetlead.ingestion.exceptions import TransientInfraError
from fleetlead.ingestion.media.base import BaseMediaConverter
from fleetlead.ingestion.media.factory import MediaConverterFactory
from fleetlead.ingestion.mime import JPEG, sniff_mime
from fleetlead.ingestion.models import (
    AcceptedAttachment,
    IncomingAttachment,
    IngestionResult,
    MediaKind,
    StillImage,
)
from fleetlead.ingestion.validator import validate_attachments
from fleetlead.logging.logger import Log
from fleetlead.queue.exceptions import QueueError
from fleetlead.queue.work_queue import WorkQueue
from fleetlead.signing.signer import SignatureVerifier, SignedPart, build_signature_payload
from fleetlead.storage.base import BaseImageStorage
from fleetlead.storage.exceptions import StorageError
from fleetlead.storage.local_storage import LocalImageStorage

ConnectionFactory = Callable[[], AbstractContextManager[psycopg.Connection[Any]]]


def build_storage_key(extension: str) -> str:
    return f"uploads/vehicle_{uuid.uuid4()}.{extension}"


@dataclass
class Submission:
    """Everything the HTTP layer hands over for one request."""

    attachments: Sequence[IncomingAttachment]
    timestamp: str | None = None
    signature: str | None = None
    sender_email: str | None = None
    location: str | None = None


class IngestionGateway:
    def __init__(
        self,
        *,
        settings: Settings,
        verifier: SignatureVerifier,
        media_converter: BaseMediaConverter,
        storage: BaseImageStorage,
        photo_repo: PhotoRepository,
        work_queue: WorkQueue,
        locator: ImageLocator | None = None,
        connection_factory: ConnectionFactory = get_connection,
        sniff: Callable[[bytes], str] = sniff_mime,
    ) -> None:
        self._settings = settings
        self._verifier = verifier
        self._media_converter = media_converter
        self._storage = storage
        self._photo_repo = photo_repo
        self._work_queue = work_queue
        self._locator = locator
        self._connection_factory = connection_factory
        self._sniff = sniff

    def ingest(self, submission: Submission) -> IngestionResult:
        """Accept a signed submission and enqueue one extraction job per image.

        Raises:
            AuthenticationError: bad, missing or stale signature.
            AttachmentValidationError: bad attachment count, type or size.
            TransientInfraError: conversion, storage or database failure.
        """
        payload = build_signature_payload(
            (
                SignedPart(a.filename, a.content_type, a.content)
                for a in submission.attachments
            ),
            sender_email=submission.sender_email,
        )
        self._verifier.verify(payload, submission.timestamp, submission.signature)

        accepted = validate_attachments(
            submission.attachments,
            max_count=self._settings.max_attachments,
            max_bytes=self._settings.max_attachment_bytes,
            sniff=self._sniff,
        )

        stills = [self._to_still(attachment) for attachment in accepted]
        locations = [submission.location or self._locate(a) for a in accepted]

        # Step 1: Store every still before anything is committed
        paths = self._store_all(stills)

        # Step 2: Record photos and extraction jobs in a single transaction
        self._record_all(paths, submission.sender_email, locations)

        result = IngestionResult(paths=paths)
        Log.info(f"Ingested {result.count} image(s)")
        return result

    def _to_still(self, attachment: AcceptedAttachment) -> StillImage:
        kind = attachment.media.kind
        if kind == MediaKind.IMAGE:
            return StillImage(attachment.content, attachment.media, attachment.filename)
        if kind == MediaKind.VIDEO:
            frame = self._media_converter.extract_frame(attachment.content, attachment.filename)
            Log.info(f"Extracted still frame from video '{attachment.filename}'")
            return StillImage(frame, JPEG, attachment.filename)
        converted = self._media_converter.convert_heic(attachment.content, attachment.filename)
        Log.info(f"Converted HEIC attachment '{attachment.filename}' to JPEG")
        return StillImage(converted, JPEG, attachment.filename)

    def _locate(self, attachment: AcceptedAttachment) -> str | None:
        if self._locator is None:
            return None
        place = self._locator.locate(attachment.content)
        if place is None:
            return None
        return place.label() or None

    def _store_all(self, stills: Sequence[StillImage]) -> list[str]:
        paths: list[str] = []
        for still in stills:
            key = build_storage_key(still.media.extension)
            try:
                paths.append(self._storage.save(key, still.content, still.media.mime))
            except StorageError as exc:
                self._discard(paths)
                raise TransientInfraError(f"Failed to store image: {exc}") from exc
        return paths

    def _record_all(
        self,
        paths: Sequence[str],
        submitted_by: str | None,
        locations: Sequence[str | None],
    ) -> None:
        try:
            with self._connection_factory() as conn:
                photo_ids = [
                    self._photo_repo.insert(
                        conn, path, submitted_by=submitted_by, location=location
                    ).id
                    for path, location in zip(paths, locations)
                ]
                for path in paths:
                    self._work_queue.send(
                        self._settings.image_queue_name, {"image_path": path}, conn=conn
                    )
                conn.commit()
        except (psycopg.Error, QueueError) as exc:
            self._discard(paths)
            raise TransientInfraError(f"Failed to record photos: {exc}") from exc

        for photo_id, path in zip(photo_ids, paths):
            Log.info(f"Stored photo {photo_id} at {path}")

    def _discard(self, paths: Sequence[str]) -> None:
        for path in paths:
            try:
                self._storage.delete(path)
            except StorageError as exc:
                Log.warning(f"Could not remove orphaned image {path}: {exc}")


def build_gateway(settings: Settings) -> IngestionGateway:
    """Build an IngestionGateway with all required adapters."""
    return IngestionGateway(
        settings=settings,
        verifier=SignatureVerifier(
            settings.webhook_secret,
            settings.signature_max_age_seconds,
        ),
        media_converter=MediaConverterFactory.create(settings),
        storage=LocalImageStorage(Path(settings.storage_root)),
        photo_repo=PhotoRepository(),
        work_queue=WorkQueue(),
        locator=ImageLocator(ReverseGeocoder.from_settings(settings)),
    )
