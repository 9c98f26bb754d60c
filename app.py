from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from persistence.snapshots import SnapshotLifecycle
from resources.errors import ResourceError
from resources.store import ResourceStore
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": True, "message": message}, status_code=status_code)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    snapshots: SnapshotLifecycle = app.state.snapshots

    # Restore failures propagate and abort startup before any request is served.
    await asyncio.to_thread(snapshots.restore_once)
    try:
        yield
    finally:
        await asyncio.to_thread(snapshots.persist_once)


def create_app(settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")
    settings = settings or get_settings()

    from endpoints.resource_endpoints import router as resource_router

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.store = ResourceStore()
    app.state.snapshots = SnapshotLifecycle(app.state.store, settings.persist_file)

    @app.exception_handler(ResourceError)
    async def resource_error_handler(request: Request, exc: ResourceError) -> JSONResponse:
        logger.info("ERR: %s %s: %s", request.method, request.url.path, exc.message)
        return _error_envelope(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("ERR: %s %s: unhandled error", request.method, request.url.path)
        return _error_envelope(500, f"internal error: {exc!r}")

    app.include_router(resource_router)

    return app


app = create_app()
