import asyncio
import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.routers import main_router
from app.core.config import Settings, settings
from app.core.exceptions import PortalError, UpstreamError
from app.core.loguru_logger import setup_logging
from app.db.seed import seed_demo_data
from app.db.storage import MemStorage
from app.services.auth_service import get_password_hash
from app.services.event_sync_service import EventSyncService
from app.services.eventbrite_client import EventbriteClient
from app.services.hubspot_client import HubSpotClient
from app.services.session_service import SessionService
from app.utils.tasks import periodic_event_sync_task


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    sync_task = None
    config = app.state.settings.eventbrite
    if config.configured and config.sync_interval_sec > 0:
        event_sync = EventSyncService(app.state.storage, app.state.eventbrite)
        sync_task = asyncio.create_task(periodic_event_sync_task(event_sync, config.sync_interval_sec))

    yield

    # shutdown
    if sync_task:
        logger.info("stop event catalog sync")
        sync_task.cancel()
        try:
            await sync_task
        except asyncio.CancelledError:
            pass


async def portal_error_handler(request: Request, exc: PortalError):
    if isinstance(exc, UpstreamError):
        logger.error(f"{request.method} {request.url.path} upstream failure: {exc.message} "
                     f"(status={exc.upstream_status})")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"{request.method} {request.url.path} invalid request: {exc.errors()}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Invalid request data"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def create_app(
    app_settings: Settings = settings,
    storage: Optional[MemStorage] = None,
    hubspot_transport: Optional[httpx.AsyncBaseTransport] = None,
    eventbrite_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the portal. Tests pass their own store and mock upstream transports."""
    if storage is None:
        storage = MemStorage()
        if app_settings.demo.seed:
            seed_demo_data(
                storage,
                get_password_hash(app_settings.demo.password),
                ticket_prefix=app_settings.registration.ticket_prefix,
            )

    app = FastAPI(lifespan=lifespan)
    app.state.settings = app_settings
    app.state.storage = storage
    app.state.sessions = SessionService(app_settings.session)
    app.state.hubspot = HubSpotClient(app_settings.hubspot, transport=hubspot_transport)
    app.state.eventbrite = EventbriteClient(app_settings.eventbrite, transport=eventbrite_transport)

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start_time = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            if request.url.path.startswith(app_settings.api.prefix):
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.info(f"{request.method} {request.url.path} {status_code} in {elapsed_ms:.0f}ms")

    app.include_router(
        main_router,
        prefix=app_settings.api.prefix,
        tags=["api"],
        responses={404: {"description": "Not found"}},
    )
    return app


def build_main_app() -> FastAPI:
    setup_logging()
    return create_app()


if __name__ == "__main__":
    uvicorn.run("main:build_main_app",
                factory=True,
                host=settings.run.host,
                port=settings.run.port,
                reload=True
    )
