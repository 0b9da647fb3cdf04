"""
Liveness and dependency health endpoints.

GET / is a cheap liveness probe. GET /health runs ``SELECT 1`` against
PostgreSQL and ``PING`` against Redis and answers 200 when both succeed,
503 otherwise. Redis only backs the status cache, but a degraded cache is
still reported so operators see it.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-011)

TODO:
- None
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from evgrid.cache.redis_client import get_redis
from evgrid.db.session import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _check_db() -> str:
    """Return "ok" if the database answers ``SELECT 1``, else "error"."""
    try:
        async for session in get_async_session():
            await session.execute(text("SELECT 1"))
        return "ok"
    except Exception:
        logger.warning("Health check: DB probe failed", exc_info=True)
        return "error"


async def _check_redis() -> str:
    """Return "ok" if Redis answers ``PING``, else "error"."""
    try:
        client = await get_redis()
        try:
            await client.ping()
        finally:
            await client.aclose()
        return "ok"
    except Exception:
        logger.warning("Health check: Redis probe failed", exc_info=True)
        return "error"


@router.get("/")
async def liveness() -> dict:
    """Liveness probe; does not touch any dependency."""
    return {"status": "ok"}


@router.get("/health")
async def health_check() -> JSONResponse:
    """Report database and Redis connectivity.

    Returns:
        JSONResponse: ``status``, ``db`` and ``redis`` fields; HTTP 200
        when every probe passes, HTTP 503 when any is degraded.
    """
    checks = {"db": await _check_db(), "redis": await _check_redis()}
    healthy = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "degraded", **checks},
    )
