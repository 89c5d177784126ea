"""HTTP surface for photo submissions."""

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from fleetlead.config.settings import Settings
from fleetlead.ingestion.exceptions import AttachmentValidationError, TransientInfraError
from fleetlead.ingestion.gateway import IngestionGateway, Submission, build_gateway
from fleetlead.ingestion.models import IncomingAttachment
from fleetlead.logging.logger import Log
from fleetlead.signing.exceptions import AuthenticationError

_TEXT_FIELDS = ("sender_email", "location")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Settings, gateway: IngestionGateway | None = None) -> FastAPI:
    """Build the ingestion API. A gateway is built from settings when not given."""
    app = FastAPI(title="Fleetlead Ingestion API")
    app.state.gateway = gateway if gateway is not None else build_gateway(settings)

    @app.exception_handler(AuthenticationError)
    async def _authentication_error(_: Request, exc: AuthenticationError) -> JSONResponse:
        Log.warning(f"Rejected submission: {exc}")
        return _error(401, str(exc))

    @app.exception_handler(AttachmentValidationError)
    async def _validation_error(_: Request, exc: AttachmentValidationError) -> JSONResponse:
        Log.warning(f"Invalid submission: {exc}")
        return _error(400, str(exc))

    @app.exception_handler(TransientInfraError)
    async def _infra_error(_: Request, exc: TransientInfraError) -> JSONResponse:
        Log.error(f"Submission failed: {exc}")
        return _error(500, str(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/ingest")
    async def ingest(request: Request) -> dict[str, object]:
        form = await request.form()
        attachments: list[IncomingAttachment] = []
        fields: dict[str, str] = {}
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                attachments.append(
                    IncomingAttachment(
                        filename=value.filename or "",
                        content_type=value.content_type or "application/octet-stream",
                        content=await value.read(),
                    )
                )
            elif name in _TEXT_FIELDS and value:
                fields[name] = value

        submission = Submission(
            attachments=attachments,
            timestamp=request.headers.get("X-Timestamp"),
            signature=request.headers.get("X-Signature"),
            sender_email=fields.get("sender_email"),
            location=fields.get("location"),
        )
        result = await run_in_threadpool(request.app.state.gateway.ingest, submission)
        return {"success": True, "paths": result.paths, "count": result.count}

    return app
