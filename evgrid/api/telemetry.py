"""
Telemetry ingest API endpoint.

Accepts a single vehicle or meter reading via POST /telemetry, classifies
and validates it, writes the history row and current-status upsert, and
invalidates the Redis status cache for the device.

CHANGELOG:
- 2026-10-12: Return 400 for payloads naming both identifiers (STORY-009)
- 2026-10-03: Initial creation (STORY-003)

TODO:
- None
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel

from evgrid.api.deps import DbSession
from evgrid.cache.redis_client import invalidate_status_cache
from evgrid.services.errors import (
    AmbiguousPayloadError,
    TelemetryValidationError,
    UnclassifiedPayloadError,
)
from evgrid.services.ingestion import device_id_of, ingest_telemetry, parse_telemetry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["telemetry"])


class IngestResponse(BaseModel):
    """Schema for the ingest acknowledgment.

    Attributes:
        status: "vehicle telemetry ingested" or "meter telemetry ingested".
    """

    status: str


@router.post("/telemetry", response_model=IngestResponse)
async def ingest(
    db: DbSession,
    payload: dict[str, Any] = Body(...),
) -> IngestResponse:
    """Ingest one vehicle or meter telemetry reading.

    Args:
        db: Async database session.
        payload: Raw JSON object with either ``vehicleId`` or ``meterId``.

    Returns:
        IngestResponse: Which kind of telemetry was ingested.

    Raises:
        HTTPException: 400 if the payload names neither or both
            identifiers, or if any field is missing or malformed.
    """
    try:
        reading = parse_telemetry(payload)
    except TelemetryValidationError as exc:
        logger.info("Rejected telemetry payload: %s", exc.errors)
        raise HTTPException(status_code=400, detail=exc.errors)
    except (UnclassifiedPayloadError, AmbiguousPayloadError) as exc:
        logger.info("Rejected telemetry payload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))

    ack = await ingest_telemetry(db, reading)

    # Best-effort cache invalidation
    device_id = device_id_of(reading)
    try:
        await invalidate_status_cache(reading.kind, device_id)
    except Exception:
        logger.warning(
            "Cache invalidation failed for %s %s", reading.kind, device_id,
            exc_info=True,
        )

    return IngestResponse(**ack)
