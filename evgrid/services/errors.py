"""
Domain exceptions raised by the telemetry, mapping and analytics services.

Routers translate these into HTTP errors; services never raise
HTTPException themselves.

CHANGELOG:
- 2026-10-12: Add AmbiguousPayloadError (STORY-009)
- 2026-10-03: Initial creation (STORY-003)

TODO:
- None
"""

UNKNOWN_TELEMETRY_MESSAGE = (
    "Unknown telemetry type. Must include either meterId or vehicleId"
)


class TelemetryServiceError(Exception):
    """Base class for all client-facing service errors."""


class TelemetryValidationError(TelemetryServiceError):
    """A telemetry payload has missing, malformed or mistyped fields.

    Attributes:
        errors: Field-level errors, each a dict with ``loc``, ``msg``
            and ``type`` keys.
    """

    def __init__(self, errors: list[dict]) -> None:
        self.errors = errors
        super().__init__(f"Invalid telemetry payload: {len(errors)} error(s)")


class UnclassifiedPayloadError(TelemetryServiceError):
    """A payload names neither a vehicle nor a meter."""

    def __init__(self, message: str = UNKNOWN_TELEMETRY_MESSAGE) -> None:
        super().__init__(message)


class AmbiguousPayloadError(TelemetryServiceError):
    """A payload names both a vehicle and a meter."""

    def __init__(self) -> None:
        super().__init__(
            "Ambiguous telemetry type. Include either meterId or vehicleId, not both"
        )


class MappingNotFoundError(TelemetryServiceError):
    """No meter is mapped to the requested vehicle."""

    def __init__(self, vehicle_id: str) -> None:
        self.vehicle_id = vehicle_id
        super().__init__(f"No meter mapped to vehicle {vehicle_id}")
