"""
Analytics service: 24-hour vehicle performance summary.

Correlates the DC energy a vehicle received with the AC energy its mapped
meter drew over the last 24 hours. Both aggregates filter on equality of
the device id and a lower bound on ``timestamp`` with no expression on
either column, so PostgreSQL answers them with a range scan over the
(device id, timestamp) index of each history table.

CHANGELOG:
- 2026-10-10: Inject ``now`` for deterministic windows in tests (STORY-008)
- 2026-10-06: Initial creation (STORY-005)

TODO:
- None
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.services.errors import MappingNotFoundError
from evgrid.services.mapping import find_mapping

logger = logging.getLogger(__name__)

PERIOD_LABEL = "last_24_hours"
WINDOW = timedelta(hours=24)

_VEHICLE_STATS_SQL = (
    "SELECT COALESCE(SUM(kwh_delivered_dc), 0) AS dc_delivered, "
    "COALESCE(AVG(battery_temp), 0) AS avg_temp "
    "FROM vehicle_telemetry_history "
    "WHERE vehicle_id = :vehicle_id AND \"timestamp\" >= :since"
)

_METER_STATS_SQL = (
    "SELECT COALESCE(SUM(kwh_consumed_ac), 0) AS ac_consumed "
    "FROM meter_telemetry_history "
    "WHERE meter_id = :meter_id AND \"timestamp\" >= :since"
)


def efficiency_ratio(dc_delivered: float, ac_consumed: float) -> float:
    """DC delivered over AC consumed, rounded to two decimals.

    Returns 0.0 when no AC consumption was recorded.
    """
    if ac_consumed > 0:
        return round(dc_delivered / ac_consumed, 2)
    return 0.0


async def get_vehicle_performance(
    session: AsyncSession,
    vehicle_id: str,
    now: datetime | None = None,
) -> dict:
    """Summarize a vehicle's energy and battery data for the last 24 hours.

    Args:
        session: Async SQLAlchemy session for database operations.
        vehicle_id: Vehicle to summarize; must already be mapped to a meter.
        now: End of the window. Defaults to the current UTC time.

    Returns:
        dict: ``vehicle_id``, ``period`` and the ``energy`` and ``battery``
        blocks, every number rounded to two decimals.

    Raises:
        MappingNotFoundError: The vehicle has no mapped meter.
    """
    mapping = await find_mapping(session, vehicle_id)
    if mapping is None:
        raise MappingNotFoundError(vehicle_id)

    since = (now or datetime.now(UTC)) - WINDOW

    vehicle_result = await session.execute(
        text(_VEHICLE_STATS_SQL), {"vehicle_id": vehicle_id, "since": since},
    )
    vehicle_row = vehicle_result.one()

    meter_result = await session.execute(
        text(_METER_STATS_SQL), {"meter_id": mapping.meter_id, "since": since},
    )
    meter_row = meter_result.one()

    dc_delivered = float(vehicle_row.dc_delivered or 0)
    avg_temp = float(vehicle_row.avg_temp or 0)
    ac_consumed = float(meter_row.ac_consumed or 0)

    logger.debug(
        "Performance for %s via meter %s since %s: dc=%s ac=%s",
        vehicle_id, mapping.meter_id, since.isoformat(), dc_delivered, ac_consumed,
    )

    return {
        "vehicle_id": vehicle_id,
        "period": PERIOD_LABEL,
        "energy": {
            "ac_consumed": round(ac_consumed, 2),
            "dc_delivered": round(dc_delivered, 2),
            "efficiency_ratio": efficiency_ratio(dc_delivered, ac_consumed),
        },
        "battery": {
            "avg_temperature": round(avg_temp, 2),
        },
    }
