"""
Ingestion service for vehicle and meter telemetry readings.

A reading is classified as vehicle or meter telemetry, validated as a
tagged union discriminated on ``kind``, then written twice:

1. History path: a plain INSERT into the append-only history table.
2. Live path: INSERT ... ON CONFLICT (device id) DO UPDATE into the
   current-status table, overwriting every non-key column.

The two writes are committed separately. A failure between them leaves
the history row in place with a stale status row; callers resubmit.
The status upsert has no event-time guard, so the last write to commit
wins even when it carries an older timestamp.

CHANGELOG:
- 2026-10-15: Strict finite measurements and ISO-8601-only timestamps (STORY-012)
- 2026-10-12: Reject payloads carrying both vehicleId and meterId (STORY-009)
- 2026-10-08: Explicit ``kind`` discriminant on the payload union (STORY-007)
- 2026-10-03: Initial creation (STORY-003)

TODO:
- None
"""

import logging
from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError, field_validator
from sqlalchemy import insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.db.models import (
    CurrentMeterStatus,
    CurrentVehicleStatus,
    MeterTelemetryHistory,
    VehicleTelemetryHistory,
)
from evgrid.schemas import CamelModel, DeviceId, Measurement
from evgrid.services.errors import (
    AmbiguousPayloadError,
    TelemetryValidationError,
    UnclassifiedPayloadError,
)

logger = logging.getLogger(__name__)

TelemetryKind = Literal["vehicle", "meter"]

# ---------------------------------------------------------------------------
# Payload schemas
# ---------------------------------------------------------------------------


class TelemetryReading(CamelModel):
    """Fields shared by every telemetry reading.

    JSON keys are camelCase (``vehicleId``, ``kwhDeliveredDc``); attributes
    are snake_case.
    """

    timestamp: datetime

    @field_validator("timestamp", mode="before")
    @classmethod
    def _require_iso_string(cls, value: Any) -> datetime:
        """Accept only ISO-8601 strings, not epoch numbers or numeric strings."""
        if not isinstance(value, str):
            raise ValueError("timestamp must be an ISO-8601 string")
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"invalid ISO-8601 timestamp: {value!r}") from None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Interpret timestamps without an offset as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class VehicleTelemetry(TelemetryReading):
    """Reading reported by a vehicle / DC charger."""

    kind: Literal["vehicle"] = "vehicle"
    vehicle_id: DeviceId
    soc: Measurement
    kwh_delivered_dc: Measurement
    battery_temp: Measurement


class MeterTelemetry(TelemetryReading):
    """Reading reported by a utility meter on the AC side."""

    kind: Literal["meter"] = "meter"
    meter_id: DeviceId
    kwh_consumed_ac: Measurement
    voltage: Measurement


Telemetry = Annotated[
    Union[VehicleTelemetry, MeterTelemetry],
    Field(discriminator="kind"),
]

_telemetry_adapter: TypeAdapter[Telemetry] = TypeAdapter(Telemetry)


# ---------------------------------------------------------------------------
# Classification and validation
# ---------------------------------------------------------------------------


def classify_telemetry(payload: Any) -> TelemetryKind:
    """Decide whether *payload* is vehicle or meter telemetry.

    An explicit ``kind`` wins; otherwise the kind is inferred from which
    identifier is present. A payload naming both identifiers is rejected
    whether or not ``kind`` is given.

    Args:
        payload: Decoded JSON request body.

    Returns:
        "vehicle" or "meter".

    Raises:
        AmbiguousPayloadError: Both ``vehicleId`` and ``meterId`` present.
        UnclassifiedPayloadError: Neither identifier present, or an
            unknown ``kind``.
    """
    if not isinstance(payload, dict):
        raise UnclassifiedPayloadError()

    has_vehicle = "vehicleId" in payload
    has_meter = "meterId" in payload
    if has_vehicle and has_meter:
        raise AmbiguousPayloadError()

    kind = payload.get("kind")
    if kind is not None:
        if kind not in ("vehicle", "meter"):
            raise UnclassifiedPayloadError(
                f"Unknown telemetry kind {kind!r}. Must be 'vehicle' or 'meter'"
            )
        return kind

    if has_vehicle:
        return "vehicle"
    if has_meter:
        return "meter"
    raise UnclassifiedPayloadError()


def parse_telemetry(payload: dict[str, Any]) -> VehicleTelemetry | MeterTelemetry:
    """Classify and validate a raw telemetry payload.

    Args:
        payload: Decoded JSON request body.

    Returns:
        The validated reading with a timezone-aware timestamp.

    Raises:
        AmbiguousPayloadError: See :func:`classify_telemetry`.
        UnclassifiedPayloadError: See :func:`classify_telemetry`.
        TelemetryValidationError: A field is missing or malformed.
    """
    kind = classify_telemetry(payload)
    try:
        return _telemetry_adapter.validate_python({**payload, "kind": kind})
    except ValidationError as exc:
        errors = [
            {
                # Drop the union tag pydantic prepends to every location.
                "loc": [part for part in err["loc"] if part != kind],
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise TelemetryValidationError(errors) from exc


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def ingest_vehicle_telemetry(
    session: AsyncSession, reading: VehicleTelemetry,
) -> dict:
    """Append a vehicle reading to history and upsert the current status.

    Args:
        session: Async SQLAlchemy session for database operations.
        reading: Validated vehicle reading.

    Returns:
        dict: Acknowledgment ``{"status": "vehicle telemetry ingested"}``.
    """
    await session.execute(
        insert(VehicleTelemetryHistory).values(
            vehicle_id=reading.vehicle_id,
            soc=reading.soc,
            kwh_delivered_dc=reading.kwh_delivered_dc,
            battery_temp=reading.battery_temp,
            timestamp=reading.timestamp,
        )
    )
    await session.commit()

    stmt = pg_insert(CurrentVehicleStatus).values(
        vehicle_id=reading.vehicle_id,
        soc=reading.soc,
        last_kwh_delivered_dc=reading.kwh_delivered_dc,
        battery_temp=reading.battery_temp,
        last_updated_at=reading.timestamp,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["vehicle_id"],
        set_={
            "soc": stmt.excluded.soc,
            "last_kwh_delivered_dc": stmt.excluded.last_kwh_delivered_dc,
            "battery_temp": stmt.excluded.battery_temp,
            "last_updated_at": stmt.excluded.last_updated_at,
        },
    )
    await session.execute(stmt)
    await session.commit()

    logger.info(
        "Ingested vehicle telemetry for %s at %s",
        reading.vehicle_id, reading.timestamp.isoformat(),
    )
    return {"status": "vehicle telemetry ingested"}


async def ingest_meter_telemetry(
    session: AsyncSession, reading: MeterTelemetry,
) -> dict:
    """Append a meter reading to history and upsert the current status.

    Args:
        session: Async SQLAlchemy session for database operations.
        reading: Validated meter reading.

    Returns:
        dict: Acknowledgment ``{"status": "meter telemetry ingested"}``.
    """
    await session.execute(
        insert(MeterTelemetryHistory).values(
            meter_id=reading.meter_id,
            kwh_consumed_ac=reading.kwh_consumed_ac,
            voltage=reading.voltage,
            timestamp=reading.timestamp,
        )
    )
    await session.commit()

    stmt = pg_insert(CurrentMeterStatus).values(
        meter_id=reading.meter_id,
        last_kwh_consumed_ac=reading.kwh_consumed_ac,
        voltage=reading.voltage,
        last_updated_at=reading.timestamp,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["meter_id"],
        set_={
            "last_kwh_consumed_ac": stmt.excluded.last_kwh_consumed_ac,
            "voltage": stmt.excluded.voltage,
            "last_updated_at": stmt.excluded.last_updated_at,
        },
    )
    await session.execute(stmt)
    await session.commit()

    logger.info(
        "Ingested meter telemetry for %s at %s",
        reading.meter_id, reading.timestamp.isoformat(),
    )
    return {"status": "meter telemetry ingested"}


async def ingest_telemetry(
    session: AsyncSession, reading: VehicleTelemetry | MeterTelemetry,
) -> dict:
    """Dispatch a validated reading to the writer for its kind."""
    if reading.kind == "vehicle":
        return await ingest_vehicle_telemetry(session, reading)
    return await ingest_meter_telemetry(session, reading)


def device_id_of(reading: VehicleTelemetry | MeterTelemetry) -> str:
    """Return the vehicle or meter identifier carried by *reading*."""
    if isinstance(reading, VehicleTelemetry):
        return reading.vehicle_id
    return reading.meter_id
