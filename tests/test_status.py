"""
Tests for the current-status endpoints (STORY-010).

Validates GET /telemetry/vehicles/{id}/status and
GET /telemetry/meters/{id}/status: Redis cache hit, cache miss with data,
404 on unknown devices, and graceful Redis failure handling.

CHANGELOG:
- 2026-10-15: Path id stripping and cache TTL bound (STORY-012)
- 2026-10-11: Initial creation (STORY-010)

TODO:
- None
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from evgrid.cache.redis_client import (
    invalidate_status_cache,
    set_cached_status,
    status_cache_key,
)

VEHICLE_STATUS = {
    "vehicle_id": "EV-1",
    "soc": 50.0,
    "last_kwh_delivered_dc": 10.0,
    "battery_temp": 25.0,
    "last_updated_at": "2026-01-01T00:00:00+00:00",
}
VEHICLE_STATUS_JSON = {
    "vehicleId": "EV-1",
    "soc": 50.0,
    "lastKwhDeliveredDc": 10.0,
    "batteryTemp": 25.0,
    "lastUpdatedAt": "2026-01-01T00:00:00+00:00",
}


def _vehicle_row() -> MagicMock:
    row = MagicMock()
    row.vehicle_id = "EV-1"
    row.soc = 50.0
    row.last_kwh_delivered_dc = 10.0
    row.battery_temp = 25.0
    row.last_updated_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return row


def _meter_row() -> MagicMock:
    row = MagicMock()
    row.meter_id = "M-1"
    row.last_kwh_consumed_ac = 12.0
    row.voltage = 230.0
    row.last_updated_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return row


def _scalar_result(row) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    return result


class TestVehicleStatusCacheHit:
    """A cached entry is served without touching the database."""

    def test_cache_hit_returns_cached_status(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = json.dumps(VEHICLE_STATUS)

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/vehicles/EV-1/status")

        assert response.status_code == 200
        assert response.json() == VEHICLE_STATUS_JSON
        mock_db_session.execute.assert_not_awaited()
        mock_redis.get.assert_awaited_once_with("status:vehicle:EV-1")
        mock_redis.aclose.assert_awaited()


class TestVehicleStatusCacheMiss:
    """A cache miss reads current_vehicle_status and fills the cache."""

    def test_cache_miss_reads_db_and_caches(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None
        mock_db_session.execute.return_value = _scalar_result(_vehicle_row())

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/vehicles/EV-1/status")

        assert response.status_code == 200
        assert response.json() == VEHICLE_STATUS_JSON
        mock_db_session.execute.assert_awaited_once()

        mock_redis.set.assert_awaited_once()
        call_args = mock_redis.set.call_args
        assert call_args.args[0] == "status:vehicle:EV-1"
        assert json.loads(call_args.args[1]) == VEHICLE_STATUS
        assert call_args.kwargs.get("ex") == 5

    def test_unknown_vehicle_returns_404(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None
        mock_db_session.execute.return_value = _scalar_result(None)

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/vehicles/EV-0/status")

        assert response.status_code == 404
        assert "EV-0" in response.json()["detail"]
        mock_redis.set.assert_not_awaited()


    def test_path_vehicle_id_is_stripped(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = json.dumps(VEHICLE_STATUS)

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/vehicles/%20EV-1%20/status")

        assert response.status_code == 200
        mock_redis.get.assert_awaited_once_with("status:vehicle:EV-1")


class TestMeterStatus:
    """GET /telemetry/meters/{meter_id}/status."""

    def test_cache_miss_reads_db(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None
        mock_db_session.execute.return_value = _scalar_result(_meter_row())

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/meters/M-1/status")

        assert response.status_code == 200
        assert response.json() == {
            "meterId": "M-1",
            "lastKwhConsumedAc": 12.0,
            "voltage": 230.0,
            "lastUpdatedAt": "2026-01-01T00:00:00+00:00",
        }

    def test_unknown_meter_returns_404(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None
        mock_db_session.execute.return_value = _scalar_result(None)

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/meters/M-0/status")

        assert response.status_code == 404


class TestRedisFailure:
    """Redis outages fall through to the database."""

    def test_connection_failure_falls_through_to_db(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_db_session.execute.return_value = _scalar_result(_vehicle_row())

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            side_effect=ConnectionError("Cannot connect to Redis"),
        ):
            response = client.get("/telemetry/vehicles/EV-1/status")

        assert response.status_code == 200
        assert response.json()["vehicleId"] == "EV-1"

    def test_set_failure_still_returns_data(
        self, client: TestClient, mock_db_session: AsyncMock,
    ) -> None:
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None
        mock_redis.set.side_effect = ConnectionError("Redis unavailable")
        mock_db_session.execute.return_value = _scalar_result(_vehicle_row())

        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            response = client.get("/telemetry/vehicles/EV-1/status")

        assert response.status_code == 200


class TestRedisClient:
    """Unit tests for the cache helpers."""

    def test_status_cache_key(self) -> None:
        assert status_cache_key("meter", "M-1") == "status:meter:M-1"

    @pytest.mark.asyncio()
    async def test_invalidate_deletes_key(self) -> None:
        with patch(
            "evgrid.cache.redis_client.get_redis", new_callable=AsyncMock,
        ) as mock_get_redis:
            mock_redis = AsyncMock()
            mock_get_redis.return_value = mock_redis

            await invalidate_status_cache("vehicle", "EV-1")

            mock_redis.delete.assert_awaited_once_with("status:vehicle:EV-1")
            mock_redis.aclose.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_write_back_after_invalidation_expires_with_ttl(self) -> None:
        """A read racing an ingest can only re-cache its row for CACHE_TTL_S."""
        mock_redis = AsyncMock()
        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            return_value=mock_redis,
        ):
            await invalidate_status_cache("vehicle", "EV-1")
            await set_cached_status("vehicle", "EV-1", VEHICLE_STATUS)

        mock_redis.delete.assert_awaited_once_with("status:vehicle:EV-1")
        mock_redis.set.assert_awaited_once_with(
            "status:vehicle:EV-1", json.dumps(VEHICLE_STATUS), ex=5,
        )

    @pytest.mark.asyncio()
    async def test_invalidate_swallows_connection_error(self) -> None:
        with patch(
            "evgrid.cache.redis_client.get_redis",
            new_callable=AsyncMock,
            side_effect=ConnectionError("Redis unavailable"),
        ):
            await invalidate_status_cache("vehicle", "EV-1")
