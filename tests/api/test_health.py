"""
Tests for health check endpoints.
"""
from unittest.mock import AsyncMock, patch

import pytest

from funnel.api.health import ComponentHealth, HealthStatus, determine_overall_status


def component(status):
    return ComponentHealth(status=status)


class TestDetermineOverallStatus:
    """Tests for determine_overall_status()."""

    def test_all_healthy(self):
        components = {"database": component(HealthStatus.HEALTHY), "redis": component(HealthStatus.HEALTHY)}
        assert determine_overall_status(components) == HealthStatus.HEALTHY

    def test_broker_down_only_degrades(self):
        components = {"database": component(HealthStatus.HEALTHY), "redis": component(HealthStatus.DEGRADED)}
        assert determine_overall_status(components) == HealthStatus.DEGRADED

    def test_database_down_is_unhealthy(self):
        components = {"database": component(HealthStatus.UNHEALTHY), "redis": component(HealthStatus.HEALTHY)}
        assert determine_overall_status(components) == HealthStatus.UNHEALTHY


class TestHealthEndpoints:
    """Tests for /health routes."""

    @pytest.mark.asyncio
    async def test_liveness(self, app_client):
        response = await app_client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_readiness_503_when_database_down(self, app_client):
        with patch(
            "funnel.api.health.check_database",
            new=AsyncMock(return_value=component(HealthStatus.UNHEALTHY)),
        ), patch(
            "funnel.api.health.check_broker",
            new=AsyncMock(return_value=component(HealthStatus.HEALTHY)),
        ):
            response = await app_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_readiness_degraded_is_still_200(self, app_client):
        with patch(
            "funnel.api.health.check_database",
            new=AsyncMock(return_value=component(HealthStatus.HEALTHY)),
        ), patch(
            "funnel.api.health.check_broker",
            new=AsyncMock(return_value=component(HealthStatus.DEGRADED)),
        ):
            response = await app_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
