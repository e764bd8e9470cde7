"""
Unit tests for FeatureEntitlementLedger.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.clock import FixedClock
from core.domain.exceptions import (
    FeatureNotEntitledError,
    FeatureNotFoundError,
    FeatureStateConflictError,
)
from core.domain.value_objects import GrantStatus, LicenseMode, LicenseStatus, PackageTier
from entitlements.domain.ledger import FeatureEntitlementLedger, LedgerConfig, UsageOutcome
from licenses.domain.license_key import FeatureGrant, LicenseKey

START = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)
FEATURE = uuid.uuid4()
OTHER = uuid.uuid4()


def active_key(grants, mode=LicenseMode.PERPETUAL):
    key = LicenseKey.create(
        verification_hash="$2b$04$hash",
        owner_id=uuid.uuid4(),
        product_id=uuid.uuid4(),
        package_tier=PackageTier.BASIC,
        license_mode=mode,
        issued_duration=1,
        grants=grants,
        now=START,
    )
    expires_at = None if mode == LicenseMode.PERPETUAL else START + timedelta(days=365)
    return replace(key, status=LicenseStatus.ACTIVE, activated_at=START, expires_at=expires_at)


class Session:
    """Drives the ledger against one key with a fixed clock."""

    def __init__(self, ledger, key, now=START):
        self.ledger = ledger
        self.key = key
        self.clock = FixedClock(now)

    def use(self, feature_id=FEATURE):
        result = self.ledger.record_usage(self.key, feature_id, self.clock.now())
        self.key = result.license_key
        return result

    def use_many(self, count, feature_id=FEATURE):
        return [self.use(feature_id) for _ in range(count)]

    def restore(self, feature_id=FEATURE):
        self.key = self.ledger.restore(self.key, feature_id, self.clock.now())
        return self.key

    def grant(self, feature_id=FEATURE):
        return self.key.find_grant(feature_id)


@pytest.fixture
def limited(ledger):
    """A perpetual key with one feature limited to 5 and an unlimited one."""
    return Session(
        ledger, active_key([FeatureGrant.fresh(FEATURE, 5), FeatureGrant.fresh(OTHER)])
    )


class TestRecordUsage:
    """Tests for quota accounting."""

    def test_limit_allows_limit_plus_one_uses(self, limited):
        """Test a limit of n permits n + 1 uses per day."""
        results = limited.use_many(6)
        assert all(result.outcome == UsageOutcome.ALLOWED for result in results)
        assert limited.grant().usage_count == 6

        denied = limited.use()
        assert denied.outcome == UsageOutcome.QUOTA_EXCEEDED
        assert denied.violation_recorded is True
        assert denied.changed is True
        assert limited.grant().consecutive_violations == 1
        assert limited.grant().status == GrantStatus.DISABLED
        assert limited.grant().usage_count == 6

    def test_violation_recorded_once_per_day(self, limited):
        """Test repeated denials on the same day do not add violations."""
        limited.use_many(7)
        before = limited.key
        again = limited.use()

        assert again.outcome == UsageOutcome.QUOTA_EXCEEDED
        assert again.license_key is before
        assert again.violation_recorded is False
        assert again.changed is False
        assert limited.grant().consecutive_violations == 1

    def test_counter_resets_next_day(self, limited):
        """Test the daily counter resets on a new calendar day."""
        limited.use_many(7)
        limited.clock.advance(days=1)

        result = limited.use()
        assert result.outcome == UsageOutcome.ALLOWED
        assert limited.grant().usage_count == 1
        assert limited.grant().status == GrantStatus.ACTIVE
        assert limited.grant().consecutive_violations == 1

    def test_second_violation_in_window_suspends_feature(self, limited):
        """Test two violations within the window move the feature to disabled."""
        limited.use_many(7)
        limited.clock.advance(days=1)
        limited.use_many(6)

        result = limited.use()

        assert result.outcome == UsageOutcome.FEATURE_SUSPENDED
        assert result.violation_recorded is True
        assert limited.key.find_grant(FEATURE) is None
        assert limited.key.find_disabled(FEATURE).limit == 5
        assert limited.key.status == LicenseStatus.ACTIVE

        after = limited.use()
        assert after.outcome == UsageOutcome.FEATURE_SUSPENDED
        assert after.changed is False

    def test_violation_outside_window_does_not_escalate(self, limited):
        """Test a second violation after the window only records a violation."""
        limited.use_many(7)
        limited.clock.advance(days=31)
        limited.use_many(6)

        result = limited.use()
        assert result.outcome == UsageOutcome.QUOTA_EXCEEDED
        assert limited.key.find_grant(FEATURE) is not None

    def test_stale_window_resets_violation_history(self, limited):
        """Test counters restart once the first use falls outside the window."""
        limited.use_many(7)
        limited.clock.advance(days=31)

        limited.use()
        grant = limited.grant()
        assert grant.consecutive_violations == 0
        assert grant.last_violation_at is None
        assert grant.first_used_at == limited.clock.now()

    def test_custom_escalation_window(self):
        """Test the window is configurable."""
        ledger = FeatureEntitlementLedger(LedgerConfig(escalation_window=timedelta(days=2)))
        session = Session(ledger, active_key([FeatureGrant.fresh(FEATURE, 0)]))
        session.use_many(2)
        session.clock.advance(days=3)
        session.use()

        result = session.use()
        assert result.outcome == UsageOutcome.QUOTA_EXCEEDED

    def test_zero_limit_allows_one_use(self, ledger):
        """Test a limit of zero still permits a single use."""
        session = Session(ledger, active_key([FeatureGrant.fresh(FEATURE, 0)]))
        assert session.use().outcome == UsageOutcome.ALLOWED
        assert session.use().outcome == UsageOutcome.QUOTA_EXCEEDED

    def test_unlimited_perpetual_is_unmetered(self, limited):
        """Test unlimited grants on active perpetual keys are not counted."""
        result = limited.use(OTHER)
        assert result.outcome == UsageOutcome.UNMETERED
        assert result.changed is False
        assert limited.grant(OTHER).usage_count == 0

    def test_unlimited_annual_is_tracked(self, ledger):
        """Test unlimited grants on annual keys are counted but never denied."""
        session = Session(ledger, active_key([FeatureGrant.fresh(FEATURE)], LicenseMode.ANNUAL))
        results = session.use_many(50)
        assert all(result.outcome == UsageOutcome.ALLOWED for result in results)
        assert session.grant().usage_count == 50

    def test_feature_not_entitled(self, limited):
        """Test using a feature the key does not hold."""
        with pytest.raises(FeatureNotEntitledError):
            limited.use(uuid.uuid4())

    def test_key_suspended_when_every_feature_disabled(self, ledger):
        """Test the key is suspended once no allowed feature remains."""
        session = Session(ledger, active_key([FeatureGrant.fresh(FEATURE, 0)]))
        session.use_many(2)
        session.clock.advance(days=1)
        session.use_many(2)

        assert session.key.allowed_features == {}
        assert session.key.status == LicenseStatus.SUSPENDED

    def test_does_not_mutate_input(self, limited):
        """Test the ledger returns new aggregates."""
        original = limited.key
        limited.use()
        assert original.find_grant(FEATURE).usage_count == 0


class TestRestore:
    """Tests for restoring disabled features."""

    def suspend(self, session):
        session.use_many(7)
        session.clock.advance(days=1)
        session.use_many(7)

    def test_restore_resets_counters(self, limited):
        """Test a restored feature gets its limit back with fresh counters."""
        self.suspend(limited)
        limited.restore()

        assert limited.key.find_disabled(FEATURE) is None
        assert limited.grant() == FeatureGrant.fresh(FEATURE, 5)

    def test_restored_feature_allows_limit_plus_one_then_denies(self, limited):
        """Test the restored grant behaves like a new one."""
        self.suspend(limited)
        limited.restore()

        results = limited.use_many(6)
        assert all(result.outcome == UsageOutcome.ALLOWED for result in results)

        denied = limited.use()
        assert denied.outcome == UsageOutcome.QUOTA_EXCEEDED
        assert limited.grant().consecutive_violations == 1

    def test_restore_reactivates_suspended_key(self, ledger):
        """Test restoring a feature of a suspended key reactivates it."""
        session = Session(ledger, active_key([FeatureGrant.fresh(FEATURE, 0)]))
        session.use_many(2)
        session.clock.advance(days=1)
        session.use_many(2)
        assert session.key.status == LicenseStatus.SUSPENDED

        session.restore()
        assert session.key.status == LicenseStatus.ACTIVE

    def test_restore_allowed_feature(self, limited):
        """Test restoring a feature that is still allowed."""
        with pytest.raises(FeatureStateConflictError):
            limited.restore()

    def test_restore_unknown_feature(self, limited):
        """Test restoring a feature that is not disabled."""
        with pytest.raises(FeatureNotFoundError):
            limited.restore(uuid.uuid4())
