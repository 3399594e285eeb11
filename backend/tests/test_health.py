"""
Tests for health check endpoints.
"""

import asyncio

from shared.utils.health import HealthStatus, aggregate_health_checks, health_check_with_timeout


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Basic health check should return healthy status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "rest-api"

    def test_detailed_health_pings_database(self, client):
        response = client.get("/api/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["database"]["status"] == "healthy"
        assert data["dependencies"]["database"]["details"]["dialect"] == "sqlite"

    def test_responses_carry_request_id(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestHealthCheckHelpers:
    """Test the health check decorator and aggregation."""

    def test_failing_check_is_reported_unhealthy(self):
        @health_check_with_timeout(timeout=1.0, component="broken")
        async def check_broken():
            raise RuntimeError("boom")

        result = asyncio.run(check_broken())
        assert result.status == HealthStatus.UNHEALTHY
        assert result.error == "boom"

    def test_timeout_is_reported_unhealthy(self):
        @health_check_with_timeout(timeout=0.01)
        async def check_slow_health():
            await asyncio.sleep(1)

        result = asyncio.run(check_slow_health())
        assert result.status == HealthStatus.UNHEALTHY
        assert result.component == "slow"
        assert "timeout" in result.error

    def test_aggregate_degrades_when_any_check_fails(self):
        @health_check_with_timeout(component="ok")
        async def check_ok():
            return {}

        @health_check_with_timeout(component="bad")
        async def check_bad():
            raise ValueError("down")

        async def run():
            return await aggregate_health_checks([check_ok(), check_bad()])

        result = asyncio.run(run())
        assert result["status"] == "degraded"
        assert result["components"]["ok"]["status"] == "healthy"
        assert result["components"]["bad"]["status"] == "unhealthy"

