"""
Integration tests for Feature API endpoints.
"""

import uuid

import pytest
from django.urls import reverse

from licenses.infrastructure.models import LicenseKey as LicenseKeyModel


@pytest.fixture
def limited_license(api_client, db_catalog):
    """An active perpetual license with Export limited to 1 use per day."""
    response = api_client.post(
        reverse("issue-license"),
        {
            "username": "alice",
            "product_id": str(db_catalog.product.id),
            "package_tier": "basic",
            "license_mode": "perpetual",
            "issued_duration": 1,
            "allowed_features": [
                {"feature_id": str(db_catalog.export.id), "limit": 1},
                {"feature_id": str(db_catalog.share.id)},
            ],
        },
        format="json",
    )
    data = response.json()
    api_client.post(
        reverse("activate-license"),
        {"username": "alice", "product_name": "Photo Studio", "license_key": data["license_secret"]},
        format="json",
    )
    return data["license"]


def use_feature(api_client, feature_id, username="alice"):
    return api_client.post(
        reverse("record-feature-usage", kwargs={"feature_id": feature_id}),
        {"username": username},
        format="json",
    )


def restore_feature(api_client, feature_id, username="alice"):
    return api_client.put(
        reverse("restore-feature", kwargs={"feature_id": feature_id}),
        {"username": username},
        format="json",
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestFeatureAPI:
    """Integration tests for Feature API."""

    def test_record_usage(self, api_client, db_catalog, limited_license):
        """Test an allowed usage."""
        response = use_feature(api_client, db_catalog.export.id)

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "allowed"
        assert data["usage_count"] == 1
        assert data["limit"] == 1

    def test_unmetered_usage(self, api_client, db_catalog, limited_license):
        """Test unlimited perpetual usage."""
        response = use_feature(api_client, db_catalog.share.id)
        assert response.status_code == 200
        assert response.json()["outcome"] == "unmetered"

    def test_quota_exceeded(self, api_client, db_catalog, limited_license):
        """Test usage past the daily ceiling returns 429 and records a violation."""
        use_feature(api_client, db_catalog.export.id)
        use_feature(api_client, db_catalog.export.id)
        response = use_feature(api_client, db_catalog.export.id)

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"
        stored = LicenseKeyModel.objects.get(id=limited_license["id"])
        export = next(
            g for g in stored.allowed_features if g["feature_id"] == str(db_catalog.export.id)
        )
        assert export["consecutive_violations"] == 1

    def test_feature_not_on_license(self, api_client, db_catalog, limited_license):
        """Test usage of a feature the license does not grant."""
        response = use_feature(api_client, db_catalog.batch.id)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "FEATURE_NOT_ENTITLED"

    def test_unknown_feature(self, api_client, db_catalog, limited_license):
        """Test usage of a feature missing from the catalog."""
        response = use_feature(api_client, uuid.uuid4())
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "FEATURE_NOT_FOUND"

    def test_inactive_license(self, api_client, db_catalog):
        """Test usage on a license that was never activated."""
        api_client.post(
            reverse("issue-license"),
            {
                "username": "alice",
                "product_id": str(db_catalog.product.id),
                "package_tier": "basic",
                "license_mode": "annual",
                "issued_duration": 1,
            },
            format="json",
        )
        response = use_feature(api_client, db_catalog.export.id)

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "LICENSE_NOT_ACTIVE"
        assert error["status"] == "inactive"

    def test_missing_username(self, api_client, db_catalog):
        """Test the username is required."""
        response = api_client.post(
            reverse("record-feature-usage", kwargs={"feature_id": db_catalog.export.id}),
            {},
            format="json",
        )
        assert response.status_code == 400

    def test_suspend_and_restore(self, api_client, db_catalog, limited_license):
        """Test a suspended feature can be restored through the API."""
        LicenseKeyModel.objects.filter(id=limited_license["id"]).update(
            allowed_features=[
                {"feature_id": str(db_catalog.share.id), "limit": None},
            ],
            disabled_features=[{"feature_id": str(db_catalog.export.id), "limit": 1}],
        )

        response = use_feature(api_client, db_catalog.export.id)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FEATURE_SUSPENDED"

        response = restore_feature(api_client, db_catalog.export.id)
        assert response.status_code == 200
        assert response.json()["limit"] == 1
        assert response.json()["license_status"] == "active"

        response = use_feature(api_client, db_catalog.export.id)
        assert response.status_code == 200

    def test_restore_allowed_feature(self, api_client, db_catalog, limited_license):
        """Test restoring a feature that is still allowed."""
        response = restore_feature(api_client, db_catalog.export.id)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "FEATURE_STATE_CONFLICT"
