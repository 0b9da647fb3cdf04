"""
Vehicle-to-meter mapping service.

One row per vehicle, written with INSERT ... ON CONFLICT (vehicle_id)
DO UPDATE so create and update share a single idempotent statement.
There is no delete path.

CHANGELOG:
- 2026-10-05: Initial creation (STORY-004)

TODO:
- None
"""

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.db.models import VehicleMeterMapping
from evgrid.services.errors import MappingNotFoundError

logger = logging.getLogger(__name__)

MAPPING_SAVED_MESSAGE = "Vehicle-meter mapping created/updated successfully"


async def create_or_update_mapping(
    session: AsyncSession, vehicle_id: str, meter_id: str,
) -> dict:
    """Map *vehicle_id* to *meter_id*, replacing any existing mapping.

    Args:
        session: Async SQLAlchemy session for database operations.
        vehicle_id: Vehicle to map.
        meter_id: Meter that supplies the vehicle's charger.

    Returns:
        dict: ``vehicle_id``, ``meter_id`` and a confirmation ``message``.
    """
    stmt = insert(VehicleMeterMapping).values(
        vehicle_id=vehicle_id, meter_id=meter_id,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["vehicle_id"],
        set_={"meter_id": stmt.excluded.meter_id},
    )
    await session.execute(stmt)
    await session.commit()

    logger.info("Mapped vehicle %s to meter %s", vehicle_id, meter_id)
    return {
        "vehicle_id": vehicle_id,
        "meter_id": meter_id,
        "message": MAPPING_SAVED_MESSAGE,
    }


async def find_mapping(
    session: AsyncSession, vehicle_id: str,
) -> VehicleMeterMapping | None:
    """Return the mapping row for *vehicle_id*, or None."""
    result = await session.execute(
        select(VehicleMeterMapping).where(
            VehicleMeterMapping.vehicle_id == vehicle_id,
        )
    )
    return result.scalar_one_or_none()


async def get_mapping(session: AsyncSession, vehicle_id: str) -> dict:
    """Return the mapping for *vehicle_id*.

    Raises:
        MappingNotFoundError: No meter is mapped to the vehicle.
    """
    mapping = await find_mapping(session, vehicle_id)
    if mapping is None:
        raise MappingNotFoundError(vehicle_id)
    return {"vehicle_id": mapping.vehicle_id, "meter_id": mapping.meter_id}
