# =============================================================================
# tests/test_health.py - Health Endpoint Tests
# =============================================================================
# Tests the public probes with SupabaseClient.get_client patched:
# - /health and /health/live never touch Supabase
# - /health/ready reports each dependency and degrades with a 503
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app


@pytest.fixture
def supabase():
    """Mocked Supabase client returned by SupabaseClient.get_client()."""
    mock = MagicMock()
    with patch("app.routers.health.SupabaseClient.get_client", return_value=mock):
        yield mock


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    """Tests for /health and /health/live."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == settings.ENVIRONMENT

    def test_live_does_no_io(self, client):
        with patch("app.routers.health.SupabaseClient.get_client") as get_client:
            response = client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"
        get_client.assert_not_called()


class TestReadiness:
    """Tests for /health/ready."""

    def test_ready_when_all_probes_pass(self, client, supabase):
        response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["bucket"] == settings.STORAGE_BUCKET
        assert body["checks"] == {
            "users_table": "healthy",
            "todos_table": "healthy",
            "storage_bucket": "healthy",
        }
        tables = [call.args[0] for call in supabase.table.call_args_list]
        assert tables == ["users", "todos"]
        supabase.storage.get_bucket.assert_called_once_with(settings.STORAGE_BUCKET)

    def test_degraded_when_bucket_missing(self, client, supabase):
        supabase.storage.get_bucket.side_effect = RuntimeError("Bucket not found: secret-detail")

        response = client.get("/api/v1/health/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["storage_bucket"] == "unhealthy"
        assert body["checks"]["todos_table"] == "healthy"
        assert "secret-detail" not in response.text

    def test_degraded_when_database_unreachable(self, client, supabase):
        supabase.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            RuntimeError("connection refused")
        )

        response = client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["users_table"] == "unhealthy"
        assert response.json()["checks"]["todos_table"] == "unhealthy"
        assert response.json()["checks"]["storage_bucket"] == "healthy"

    def test_ready_is_public(self, client, supabase):
        response = client.get("/api/v1/health/ready", follow_redirects=False)

        assert response.status_code == 200
