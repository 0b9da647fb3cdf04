"""
FastAPI application entry point for the telemetry API.

Registers the telemetry, status, analytics and health routers and maps
request validation failures to HTTP 400.

CHANGELOG:
- 2026-10-13: Register health router (STORY-011)
- 2026-10-11: Register status router (STORY-010)
- 2026-10-09: Configure JSON logging and dispose the engine in lifespan (STORY-006)
- 2026-10-06: Register analytics router (STORY-005)
- 2026-10-03: Register telemetry router, answer validation errors with 400 (STORY-003)
- 2026-10-02: Initial creation (STORY-001)

TODO:
- None
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from evgrid.api.analytics import router as analytics_router
from evgrid.api.health import router as health_router
from evgrid.api.status import router as status_router
from evgrid.api.telemetry import router as telemetry_router
from evgrid.config import get_settings
from evgrid.db.session import dispose_engine
from evgrid.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging, release the pool on exit."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info("Telemetry API starting")
    yield
    await dispose_engine()
    logger.info("Telemetry API stopped")


app = FastAPI(
    title="EV Grid Telemetry API",
    description=(
        "Ingests EV charger and utility meter telemetry and reports "
        "24-hour DC/AC charging efficiency per vehicle."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(telemetry_router)
app.include_router(status_router)
app.include_router(analytics_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Answer malformed or incomplete request bodies with 400.

    The body keeps FastAPI's field-level ``detail`` list.
    """
    logger.info(
        "400 validation error on %s %s: %s",
        request.method, request.url.path, exc.errors(),
    )
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )
