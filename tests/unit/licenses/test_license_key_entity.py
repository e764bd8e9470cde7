"""
Unit tests for the LicenseKey aggregate and its feature grants.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from core.domain.value_objects import LicenseMode, LicenseStatus, PackageTier
from licenses.domain.license_key import DisabledFeatureRecord, FeatureGrant, LicenseKey

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_key(grants=None, **overrides):
    key = LicenseKey.create(
        verification_hash="$2b$04$hash",
        owner_id=uuid.uuid4(),
        product_id=uuid.uuid4(),
        package_tier=PackageTier.BASIC,
        license_mode=LicenseMode.PERPETUAL,
        issued_duration=1,
        grants=grants or [],
        now=NOW,
    )
    return replace(key, **overrides) if overrides else key


class TestFeatureGrant:
    """Tests for FeatureGrant."""

    def test_fresh_grant(self):
        """Test a fresh grant has zeroed counters."""
        grant = FeatureGrant.fresh(uuid.uuid4(), 5)
        assert grant.usage_count == 0
        assert grant.consecutive_violations == 0
        assert grant.first_used_at is None
        assert grant.is_unlimited is False

    def test_unlimited_grant(self):
        """Test a grant without limit is unlimited."""
        assert FeatureGrant.fresh(uuid.uuid4()).is_unlimited is True

    def test_negative_limit(self):
        """Test negative limits are rejected."""
        with pytest.raises(ValueError):
            FeatureGrant(feature_id=uuid.uuid4(), limit=-1)

    def test_disabled_record_restores_limit(self):
        """Test restoring a disabled record keeps its limit with fresh counters."""
        feature_id = uuid.uuid4()
        grant = DisabledFeatureRecord(feature_id=feature_id, limit=7).restore()
        assert grant == FeatureGrant.fresh(feature_id, 7)


class TestLicenseKey:
    """Tests for LicenseKey entity."""

    def test_create_is_inactive(self):
        """Test new keys start inactive without activation or expiry."""
        key = make_key()
        assert key.status == LicenseStatus.INACTIVE
        assert key.activated_at is None
        assert key.expires_at is None
        assert key.version == 0
        assert key.is_perpetual is True

    def test_requires_hash(self):
        """Test a verification hash is required."""
        with pytest.raises(ValueError):
            make_key(verification_hash="")

    def test_feature_cannot_be_allowed_and_disabled(self):
        """Test the two feature collections are disjoint."""
        feature_id = uuid.uuid4()
        key = make_key([FeatureGrant.fresh(feature_id)])
        with pytest.raises(ValueError):
            replace(key, disabled_features={feature_id: DisabledFeatureRecord(feature_id)})

    def test_grants_keep_insertion_order(self):
        """Test grants are returned in the order they were granted."""
        ids = [uuid.uuid4() for _ in range(3)]
        key = make_key([FeatureGrant.fresh(feature_id) for feature_id in ids])
        assert [grant.feature_id for grant in key.grants] == ids

    def test_with_grant_replaces_in_place(self):
        """Test replacing one grant keeps its position."""
        first, second = uuid.uuid4(), uuid.uuid4()
        key = make_key([FeatureGrant.fresh(first), FeatureGrant.fresh(second)])
        updated = key.with_grant(FeatureGrant(feature_id=first, usage_count=3), NOW)
        assert [grant.feature_id for grant in updated.grants] == [first, second]
        assert updated.find_grant(first).usage_count == 3
        assert key.find_grant(first).usage_count == 0

    def test_with_grant_requires_allowed_feature(self):
        """Test replacing an unknown grant fails."""
        with pytest.raises(ValueError):
            make_key().with_grant(FeatureGrant.fresh(uuid.uuid4()), NOW)

    def test_suspend_and_restore_feature(self):
        """Test moving a feature between the two collections."""
        feature_id = uuid.uuid4()
        key = make_key([FeatureGrant(feature_id=feature_id, limit=4, usage_count=5)])

        suspended = key.suspend_feature(feature_id, NOW)
        assert suspended.find_grant(feature_id) is None
        assert suspended.find_disabled(feature_id) == DisabledFeatureRecord(feature_id, 4)

        restored = suspended.restore_feature(feature_id, NOW)
        assert restored.find_disabled(feature_id) is None
        assert restored.find_grant(feature_id) == FeatureGrant.fresh(feature_id, 4)

    def test_with_grants_drops_regranted_disabled_records(self):
        """Test re-granting a disabled feature removes its disabled record."""
        kept, regranted = uuid.uuid4(), uuid.uuid4()
        key = make_key(
            disabled_features={
                kept: DisabledFeatureRecord(kept, 1),
                regranted: DisabledFeatureRecord(regranted, 2),
            }
        )
        updated = key.with_grants([FeatureGrant.fresh(regranted, 9)], NOW)
        assert list(updated.disabled_features) == [kept]
        assert updated.find_grant(regranted).limit == 9

        cleared = key.with_grants([], NOW, keep_disabled=False)
        assert cleared.disabled_features == {}
