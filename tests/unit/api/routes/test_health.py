"""
Unit tests for health and diagnostic endpoints.
"""

import pytest
from unittest.mock import AsyncMock, patch


@pytest.mark.asyncio
class TestHealthRoutes:
    """Tests for GET /health."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "timestamp" in data


@pytest.mark.asyncio
class TestDiagnosticRoutes:
    """Tests for the /api diagnostic endpoints."""

    async def test_store_diagnostic(self, client):
        """Test /users/test is not captured by /users/{email}."""
        response = await client.get("/api/users/test")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "API is working"
        assert data["env"]["environment"] == "local"
        assert data["env"]["port"] == 8000
        assert data["env"]["databaseConnected"] == "Connected"

    async def test_store_diagnostic_reports_error(self, client):
        with patch(
            "packages.subscribers.repositories.subscriber_repository.SubscriberRepository.ping",
            new=AsyncMock(side_effect=RuntimeError("store down")),
        ):
            response = await client.get("/api/users/test")

        assert response.status_code == 200
        assert response.json()["env"]["databaseConnected"] == "Error: store down"

    async def test_api_ping(self, client):
        response = await client.get("/api/test")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "message": "API is working"}

    async def test_cors_echo(self, client):
        response = await client.get(
            "/api/cors-test", headers={"Origin": "https://visaslot.example"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["request"]["headers"]["origin"] == "https://visaslot.example"
        assert data["request"]["path"] == "/api/cors-test"
        assert data["environment"]["allowedOrigins"] == ["*"]
