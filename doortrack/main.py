"""FastAPI entrypoint for the door order tracker."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from doortrack.api.deps import AppServices
from doortrack.api.v1.api import api_router
from doortrack.core.config import Settings, settings
from doortrack.core.logging import configure_logging
from doortrack.services.photo_storage import build_photo_storage
from doortrack.storage.errors import StorageError
from doortrack.storage.factory import build_remote_client, build_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Door Order Tracker")
app.include_router(api_router, prefix="/api/v1")


def build_services(config: Settings) -> AppServices:
    remote_client = build_remote_client(config)
    return AppServices(
        store=build_store(config, remote_client),
        photos=build_photo_storage(remote_client),
        config=config,
    )


@app.on_event("startup")
def startup() -> None:
    configure_logging(settings)
    app.state.services = build_services(settings)
    logger.info("[BOOTSTRAP] Storage ready: %s", type(app.state.services.store).__name__)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("[STORAGE] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Operation failed, please try again."})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
