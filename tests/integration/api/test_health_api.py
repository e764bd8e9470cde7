"""
Integration tests for health, readiness and metrics endpoints.
"""

import pytest
from django.urls import reverse


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthAPI:
    """Integration tests for operational endpoints."""

    def test_health(self, api_client):
        """Test the liveness endpoint."""
        response = api_client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_db(self, api_client):
        """Test the database check reports a connection."""
        response = api_client.get(reverse("health-db"))

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_ready(self, api_client):
        """Test readiness lists its checks."""
        response = api_client.get(reverse("ready"))

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "checks": {"database": True}}

    def test_metrics(self, api_client):
        """Test the Prometheus exposition includes request counters."""
        api_client.get(reverse("health"))
        response = api_client.get(reverse("metrics"))

        assert response.status_code == 200
        assert b"http_requests_total" in response.content
