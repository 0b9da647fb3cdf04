"""
Database package for SQLAlchemy models and session management.

CHANGELOG:
- 2026-10-05: Export VehicleMeterMapping (STORY-004)
- 2026-10-02: Initial creation (STORY-002)

TODO:
- None
"""

from evgrid.db.models import (
    Base,
    CurrentMeterStatus,
    CurrentVehicleStatus,
    MeterTelemetryHistory,
    VehicleMeterMapping,
    VehicleTelemetryHistory,
)
from evgrid.db.session import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_async_session,
    init_engine,
)

__all__ = [
    "Base",
    "CurrentMeterStatus",
    "CurrentVehicleStatus",
    "MeterTelemetryHistory",
    "VehicleMeterMapping",
    "VehicleTelemetryHistory",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_session",
    "init_engine",
]
