"""
Tests for the health, ping and root endpoints.
"""
from datetime import datetime, timezone
from unittest.mock import patch

from app.core.config import settings
from libs.domain_types import InterpretationMode


class TestHealthCheck:
    """Tests for GET /v1/health."""

    def test_reports_healthy(self, client):
        response = client.get(f"{settings.API_V1_PREFIX}/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == settings.APP_NAME
        assert data["version"] == settings.APP_VERSION
        assert data["environment"] == settings.ENV

    def test_reports_default_mode(self, client, monkeypatch):
        monkeypatch.setattr(
            settings, "RCI_DEFAULT_MODE", InterpretationMode.THRESHOLD_COMPARE
        )

        response = client.get(f"{settings.API_V1_PREFIX}/health")

        assert response.json()["default_mode"] == "threshold_compare"

    def test_timestamp_is_utc(self, client):
        fixed = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

        with patch("app.api.v1.health.utc_now", return_value=fixed):
            response = client.get(f"{settings.API_V1_PREFIX}/health")

        assert response.json()["timestamp"] == "2024-03-01T09:30:00+00:00"


class TestPing:
    """Tests for GET /v1/ping."""

    def test_pong(self, client):
        response = client.get(f"{settings.API_V1_PREFIX}/ping")

        assert response.status_code == 200
        assert response.json() == {"message": "pong"}


class TestRoot:
    """Tests for the root endpoint."""

    def test_points_to_docs(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == settings.APP_VERSION
        assert data["docs"] == f"{settings.API_V1_PREFIX}/docs"

    def test_openapi_lists_rci_routes(self, client):
        response = client.get(f"{settings.API_V1_PREFIX}/openapi.json")

        paths = response.json()["paths"]
        assert f"{settings.API_V1_PREFIX}/rci/calculate" in paths
        assert f"{settings.API_V1_PREFIX}/rci/modes" in paths
