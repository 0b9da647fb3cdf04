"""
SQLAlchemy ORM models for the telemetry database.

Two append-only history tables record every reading ever received; two
current-status tables hold one row per device with the latest reading;
one mapping table ties each vehicle to the meter that feeds its charger.

The history tables carry a composite (device id, timestamp) index so the
24-hour analytics aggregates resolve to an index range scan.

CHANGELOG:
- 2026-10-12: Index vehicle_meter_mapping.meter_id (STORY-009)
- 2026-10-05: Add VehicleMeterMapping (STORY-004)
- 2026-10-02: Initial creation (STORY-002)

TODO:
- None
"""

import datetime

from sqlalchemy import BigInteger, DateTime, Double, Identity, Index, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all telemetry ORM models."""

    pass


class VehicleTelemetryHistory(Base):
    """Append-only record of a vehicle telemetry reading.

    Attributes:
        id: Surrogate primary key.
        vehicle_id: Identifier of the vehicle.
        soc: Battery state of charge in percent.
        kwh_delivered_dc: DC energy delivered to the vehicle (kWh).
        battery_temp: Battery temperature in degrees Celsius.
        timestamp: Caller-supplied measurement time.
    """

    __tablename__ = "vehicle_telemetry_history"
    __table_args__ = (
        Index(
            "ix_vehicle_telemetry_history_vehicle_id_timestamp",
            "vehicle_id",
            "timestamp",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, Identity(always=False), primary_key=True)
    vehicle_id: Mapped[str] = mapped_column(Text, nullable=False)
    soc: Mapped[float] = mapped_column(Double, nullable=False)
    kwh_delivered_dc: Mapped[float] = mapped_column(Double, nullable=False)
    battery_temp: Mapped[float] = mapped_column(Double, nullable=False)
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation of the history row."""
        return (
            f"VehicleTelemetryHistory(vehicle_id={self.vehicle_id!r}, "
            f"timestamp={self.timestamp!r}, kwh_delivered_dc={self.kwh_delivered_dc!r})"
        )


class MeterTelemetryHistory(Base):
    """Append-only record of a meter telemetry reading.

    Attributes:
        id: Surrogate primary key.
        meter_id: Identifier of the utility meter.
        kwh_consumed_ac: AC energy drawn from the grid (kWh).
        voltage: Line voltage in volts.
        timestamp: Caller-supplied measurement time.
    """

    __tablename__ = "meter_telemetry_history"
    __table_args__ = (
        Index(
            "ix_meter_telemetry_history_meter_id_timestamp",
            "meter_id",
            "timestamp",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, Identity(always=False), primary_key=True)
    meter_id: Mapped[str] = mapped_column(Text, nullable=False)
    kwh_consumed_ac: Mapped[float] = mapped_column(Double, nullable=False)
    voltage: Mapped[float] = mapped_column(Double, nullable=False)
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation of the history row."""
        return (
            f"MeterTelemetryHistory(meter_id={self.meter_id!r}, "
            f"timestamp={self.timestamp!r}, kwh_consumed_ac={self.kwh_consumed_ac!r})"
        )


class CurrentVehicleStatus(Base):
    """Latest ingested reading for a vehicle, one row per vehicle_id."""

    __tablename__ = "current_vehicle_status"

    vehicle_id: Mapped[str] = mapped_column(Text, primary_key=True)
    soc: Mapped[float] = mapped_column(Double, nullable=False)
    last_kwh_delivered_dc: Mapped[float] = mapped_column(Double, nullable=False)
    battery_temp: Mapped[float] = mapped_column(Double, nullable=False)
    last_updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"CurrentVehicleStatus(vehicle_id={self.vehicle_id!r}, "
            f"last_updated_at={self.last_updated_at!r})"
        )


class CurrentMeterStatus(Base):
    """Latest ingested reading for a meter, one row per meter_id."""

    __tablename__ = "current_meter_status"

    meter_id: Mapped[str] = mapped_column(Text, primary_key=True)
    last_kwh_consumed_ac: Mapped[float] = mapped_column(Double, nullable=False)
    voltage: Mapped[float] = mapped_column(Double, nullable=False)
    last_updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"CurrentMeterStatus(meter_id={self.meter_id!r}, "
            f"last_updated_at={self.last_updated_at!r})"
        )


class VehicleMeterMapping(Base):
    """Maps a vehicle to the meter that supplies its charger.

    Keyed by vehicle_id. A meter may serve several vehicles, so meter_id
    is indexed but not unique.
    """

    __tablename__ = "vehicle_meter_mapping"
    __table_args__ = (
        Index("ix_vehicle_meter_mapping_meter_id", "meter_id"),
    )

    vehicle_id: Mapped[str] = mapped_column(Text, primary_key=True)
    meter_id: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return (
            f"VehicleMeterMapping(vehicle_id={self.vehicle_id!r}, "
            f"meter_id={self.meter_id!r})"
        )
