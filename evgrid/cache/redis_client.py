"""
Redis client for the current-status cache.

Provides helpers for creating Redis connections and for reading, writing
and invalidating cached current-status rows. Every operation is
best-effort: connection failures are logged but never propagate, so a
Redis outage only costs a database round trip.

CHANGELOG:
- 2026-10-11: Key status entries by telemetry kind (STORY-010)
- 2026-10-03: Initial creation (STORY-003)

TODO:
- None
"""

import json
import logging

import redis.asyncio as redis

from evgrid.config import get_settings

logger = logging.getLogger(__name__)


def status_cache_key(kind: str, device_id: str) -> str:
    """Return the cache key for a device's current status.

    Args:
        kind: Telemetry kind, "vehicle" or "meter".
        device_id: Vehicle or meter identifier.
    """
    return f"status:{kind}:{device_id}"


async def get_redis() -> redis.Redis:
    """Create and return an async Redis client from application settings.

    Returns:
        redis.Redis: Async Redis client.
    """
    settings = get_settings()
    return redis.from_url(settings.REDIS_URL)


async def get_cached_status(kind: str, device_id: str) -> dict | None:
    """Read a cached current-status entry.

    Returns:
        dict or None: Cached status dict, or None on miss/failure.
    """
    try:
        client = await get_redis()
        try:
            raw = await client.get(status_cache_key(kind, device_id))
            if raw is not None:
                return json.loads(raw)
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Redis cache read failed for %s %s", kind, device_id, exc_info=True,
        )
    return None


async def set_cached_status(kind: str, device_id: str, data: dict) -> None:
    """Cache a current-status entry for CACHE_TTL_S seconds."""
    try:
        settings = get_settings()
        client = await get_redis()
        try:
            await client.set(
                status_cache_key(kind, device_id),
                json.dumps(data),
                ex=settings.CACHE_TTL_S,
            )
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Redis cache write failed for %s %s", kind, device_id, exc_info=True,
        )


async def invalidate_status_cache(kind: str, device_id: str) -> None:
    """Delete the cached current status for a device.

    Called after every ingest. A status read already in flight may still
    write back the row it loaded before the ingest committed; that entry
    lasts until its TTL expires, which bounds status staleness at
    CACHE_TTL_S seconds. If Redis is unavailable the error is logged and
    the entry likewise expires after its TTL.
    """
    try:
        client = await get_redis()
        try:
            await client.delete(status_cache_key(kind, device_id))
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Failed to invalidate cache for %s %s", kind, device_id, exc_info=True,
        )
