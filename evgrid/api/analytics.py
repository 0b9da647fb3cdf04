"""
Analytics API endpoints: vehicle performance and vehicle-meter mappings.

Provides:
- GET  /analytics/performance/{vehicle_id}
- POST /analytics/mappings
- PUT  /analytics/mappings/{vehicle_id}
- GET  /analytics/mappings/{vehicle_id}

A vehicle must be mapped to a meter before its performance can be read.

CHANGELOG:
- 2026-10-15: Normalize path vehicle ids like body ids (STORY-012)
- 2026-10-06: Add performance endpoint (STORY-005)
- 2026-10-05: Initial creation with mapping endpoints (STORY-004)

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException

from evgrid.api.deps import DbSession
from evgrid.schemas import CamelModel, DeviceId
from evgrid.services.analytics import get_vehicle_performance
from evgrid.services.errors import MappingNotFoundError
from evgrid.services.mapping import create_or_update_mapping, get_mapping

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


# ---------------------------------------------------------------------------
# Pydantic request / response schemas
# ---------------------------------------------------------------------------


class MappingCreate(CamelModel):
    """Body of POST /analytics/mappings."""

    vehicle_id: DeviceId
    meter_id: DeviceId


class MappingUpdate(CamelModel):
    """Body of PUT /analytics/mappings/{vehicle_id}."""

    meter_id: DeviceId


class MappingResponse(CamelModel):
    """A vehicle-meter mapping."""

    vehicle_id: str
    meter_id: str


class MappingSavedResponse(MappingResponse):
    """A saved mapping plus a confirmation message."""

    message: str


class EnergySummary(CamelModel):
    """Energy block of the performance response (kWh, ratio unitless)."""

    ac_consumed: float
    dc_delivered: float
    efficiency_ratio: float


class BatterySummary(CamelModel):
    """Battery block of the performance response (degrees Celsius)."""

    avg_temperature: float


class PerformanceResponse(CamelModel):
    """24-hour performance summary for a vehicle."""

    vehicle_id: str
    period: str
    energy: EnergySummary
    battery: BatterySummary


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/performance/{vehicle_id}", response_model=PerformanceResponse)
async def get_performance(vehicle_id: DeviceId, db: DbSession) -> PerformanceResponse:
    """Return the last-24-hours energy and battery summary for a vehicle.

    Raises:
        HTTPException: 404 if the vehicle has no mapped meter.
    """
    try:
        summary = await get_vehicle_performance(db, vehicle_id)
    except MappingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return PerformanceResponse(**summary)


@router.post("/mappings", response_model=MappingSavedResponse)
async def create_mapping(body: MappingCreate, db: DbSession) -> MappingSavedResponse:
    """Create or replace the meter mapping of a vehicle."""
    saved = await create_or_update_mapping(db, body.vehicle_id, body.meter_id)
    return MappingSavedResponse(**saved)


@router.put("/mappings/{vehicle_id}", response_model=MappingSavedResponse)
async def update_mapping(
    vehicle_id: DeviceId, body: MappingUpdate, db: DbSession,
) -> MappingSavedResponse:
    """Point a vehicle at a different meter; creates the mapping if absent."""
    saved = await create_or_update_mapping(db, vehicle_id, body.meter_id)
    return MappingSavedResponse(**saved)


@router.get("/mappings/{vehicle_id}", response_model=MappingResponse)
async def read_mapping(vehicle_id: DeviceId, db: DbSession) -> MappingResponse:
    """Return the meter mapped to a vehicle.

    Raises:
        HTTPException: 404 if the vehicle has no mapping.
    """
    try:
        mapping = await get_mapping(db, vehicle_id)
    except MappingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return MappingResponse(**mapping)
