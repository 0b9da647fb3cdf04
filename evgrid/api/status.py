"""
Current-status API endpoints for vehicles and meters.

Serves the latest ingested reading of a device from the current-status
tables via GET /telemetry/vehicles/{vehicle_id}/status and
GET /telemetry/meters/{meter_id}/status. Redis is used as a read-through
cache with TTL-based expiry; Redis failures fall through to the database.
A read that overlaps an ingest may cache the row it loaded before the
ingest committed, so a status can lag by up to CACHE_TTL_S seconds.

CHANGELOG:
- 2026-10-15: Strip and require path device ids (STORY-012)
- 2026-10-11: Initial creation (STORY-010)

TODO:
- None
"""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from evgrid.api.deps import DbSession
from evgrid.cache.redis_client import get_cached_status, set_cached_status
from evgrid.db.models import CurrentMeterStatus, CurrentVehicleStatus
from evgrid.schemas import CamelModel, DeviceId

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telemetry", tags=["status"])


# ---------------------------------------------------------------------------
# Pydantic response schemas
# ---------------------------------------------------------------------------


class VehicleStatusResponse(CamelModel):
    """Latest reading of a vehicle.

    Attributes:
        vehicle_id: Identifier of the vehicle.
        soc: Battery state of charge in percent.
        last_kwh_delivered_dc: DC energy of the latest reading (kWh).
        battery_temp: Battery temperature in degrees Celsius.
        last_updated_at: Timestamp of the latest reading (ISO 8601).
    """

    vehicle_id: str
    soc: float
    last_kwh_delivered_dc: float
    battery_temp: float
    last_updated_at: str


class MeterStatusResponse(CamelModel):
    """Latest reading of a meter.

    Attributes:
        meter_id: Identifier of the meter.
        last_kwh_consumed_ac: AC energy of the latest reading (kWh).
        voltage: Line voltage in volts.
        last_updated_at: Timestamp of the latest reading (ISO 8601).
    """

    meter_id: str
    last_kwh_consumed_ac: float
    voltage: float
    last_updated_at: str


def _isoformat(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get(
    "/vehicles/{vehicle_id}/status", response_model=VehicleStatusResponse,
)
async def get_vehicle_status(vehicle_id: DeviceId, db: DbSession) -> VehicleStatusResponse:
    """Return the current status of a vehicle.

    Raises:
        HTTPException: 404 if no telemetry was ever ingested for the vehicle.
    """
    cached = await get_cached_status("vehicle", vehicle_id)
    if cached is not None:
        return VehicleStatusResponse(**cached)

    result = await db.execute(
        select(CurrentVehicleStatus).where(
            CurrentVehicleStatus.vehicle_id == vehicle_id,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise HTTPException(
            status_code=404,
            detail=f"No status found for vehicle {vehicle_id}",
        )

    data = {
        "vehicle_id": row.vehicle_id,
        "soc": row.soc,
        "last_kwh_delivered_dc": row.last_kwh_delivered_dc,
        "battery_temp": row.battery_temp,
        "last_updated_at": _isoformat(row.last_updated_at),
    }
    await set_cached_status("vehicle", vehicle_id, data)
    return VehicleStatusResponse(**data)


@router.get("/meters/{meter_id}/status", response_model=MeterStatusResponse)
async def get_meter_status(meter_id: DeviceId, db: DbSession) -> MeterStatusResponse:
    """Return the current status of a meter.

    Raises:
        HTTPException: 404 if no telemetry was ever ingested for the meter.
    """
    cached = await get_cached_status("meter", meter_id)
    if cached is not None:
        return MeterStatusResponse(**cached)

    result = await db.execute(
        select(CurrentMeterStatus).where(CurrentMeterStatus.meter_id == meter_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise HTTPException(
            status_code=404,
            detail=f"No status found for meter {meter_id}",
        )

    data = {
        "meter_id": row.meter_id,
        "last_kwh_consumed_ac": row.last_kwh_consumed_ac,
        "voltage": row.voltage,
        "last_updated_at": _isoformat(row.last_updated_at),
    }
    await set_cached_status("meter", meter_id, data)
    return MeterStatusResponse(**data)
