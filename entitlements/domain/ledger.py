"""
Feature entitlement ledger.

Per-feature quota accounting on a LicenseKey: daily usage counters,
violation recording, escalation into the disabled collection, and
manual restoration.

A grant with limit ``n`` permits ``n + 1`` uses per calendar day (UTC).
The next attempt records a violation, at most once per day. A second
violation while the previous one is still inside the escalation window
moves the grant to ``disabled_features`` until it is restored.
"""

import enum
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from core.domain.clock import calendar_day
from core.domain.exceptions import (
    FeatureNotEntitledError,
    FeatureNotFoundError,
    FeatureStateConflictError,
)
from core.domain.value_objects import GrantStatus, LicenseStatus
from licenses.domain.license_key import FeatureGrant, LicenseKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerConfig:
    """Quota accounting settings."""

    escalation_window: timedelta = timedelta(days=30)

    def __post_init__(self):
        """Validate configuration."""
        if self.escalation_window <= timedelta(0):
            raise ValueError("Escalation window must be positive")


class UsageOutcome(enum.Enum):
    """Result of one usage attempt."""

    ALLOWED = "allowed"
    UNMETERED = "unmetered"
    QUOTA_EXCEEDED = "quota_exceeded"
    FEATURE_SUSPENDED = "feature_suspended"


@dataclass(frozen=True)
class UsageResult:
    """
    Outcome of ``record_usage``.

    ``license_key`` is the possibly-mutated aggregate; ``changed`` tells
    the caller whether it must be persisted. Denied attempts may still
    carry changes (a recorded violation) that have to be saved before
    the denial is reported.
    """

    license_key: LicenseKey
    outcome: UsageOutcome
    grant: Optional[FeatureGrant]
    changed: bool
    violation_recorded: bool = False

    @property
    def allowed(self) -> bool:
        """Check if the usage attempt succeeded."""
        return self.outcome in (UsageOutcome.ALLOWED, UsageOutcome.UNMETERED)


class FeatureEntitlementLedger:
    """Applies the quota and violation algorithm to one grant at a time."""

    def __init__(self, config: LedgerConfig = None):
        self.config = config or LedgerConfig()

    def record_usage(self, license_key: LicenseKey, feature_id: uuid.UUID, now: datetime) -> UsageResult:
        """
        Account for one use of a feature.

        Args:
            license_key: Key holding the grant (status already normalized)
            feature_id: Feature being used
            now: Current time

        Returns:
            UsageResult describing the outcome and the resulting key

        Raises:
            FeatureNotEntitledError: If the key holds no grant or disabled record for the feature
        """
        grant = license_key.find_grant(feature_id)
        if grant is None:
            if license_key.find_disabled(feature_id) is not None:
                return UsageResult(license_key, UsageOutcome.FEATURE_SUSPENDED, None, changed=False)
            raise FeatureNotEntitledError()

        if (
            grant.is_unlimited
            and license_key.is_perpetual
            and license_key.status == LicenseStatus.ACTIVE
        ):
            return UsageResult(license_key, UsageOutcome.UNMETERED, grant, changed=False)

        if grant.last_used_at is not None and calendar_day(grant.last_used_at) < calendar_day(now):
            grant = replace(grant, usage_count=0, status=GrantStatus.ACTIVE)

        window_start = now - self.config.escalation_window

        if grant.limit is not None and grant.usage_count >= grant.limit + 1:
            return self._deny(license_key, grant, now, window_start)

        if grant.first_used_at is not None and grant.first_used_at < window_start:
            grant = replace(
                grant,
                consecutive_violations=0,
                last_violation_at=None,
                first_used_at=now,
                status=GrantStatus.ACTIVE,
            )

        grant = replace(
            grant,
            usage_count=grant.usage_count + 1,
            last_used_at=now,
            first_used_at=grant.first_used_at or now,
        )
        return UsageResult(
            license_key.with_grant(grant, now),
            UsageOutcome.ALLOWED,
            grant,
            changed=True,
        )

    def restore(self, license_key: LicenseKey, feature_id: uuid.UUID, now: datetime) -> LicenseKey:
        """
        Move a disabled feature back to the allowed collection.

        The preserved limit is reinstated with all counters reset. A key
        that was suspended because every feature had been disabled
        becomes active again.

        Args:
            license_key: Key holding the disabled record
            feature_id: Feature to restore
            now: Current time

        Returns:
            Updated LicenseKey

        Raises:
            FeatureStateConflictError: If the feature is already allowed
            FeatureNotFoundError: If the feature is not disabled on this key
        """
        if license_key.find_grant(feature_id) is not None:
            raise FeatureStateConflictError()
        if license_key.find_disabled(feature_id) is None:
            raise FeatureNotFoundError("Feature not found in disabled features")

        restored = license_key.restore_feature(feature_id, now)
        if restored.status == LicenseStatus.SUSPENDED:
            restored = replace(restored, status=LicenseStatus.ACTIVE)

        logger.info(
            "Feature restored",
            extra={"license_key_id": str(license_key.id), "feature_id": str(feature_id)},
        )
        return restored

    def _deny(
        self,
        license_key: LicenseKey,
        grant: FeatureGrant,
        now: datetime,
        window_start: datetime,
    ) -> UsageResult:
        """Handle an attempt past the daily ceiling."""
        already_recorded_today = grant.last_violation_at is not None and calendar_day(
            grant.last_violation_at
        ) == calendar_day(now)

        if already_recorded_today:
            return UsageResult(license_key, UsageOutcome.QUOTA_EXCEEDED, grant, changed=False)

        previous_violation_at = grant.last_violation_at
        grant = replace(
            grant,
            consecutive_violations=grant.consecutive_violations + 1,
            status=GrantStatus.DISABLED,
            last_violation_at=now,
        )
        updated = license_key.with_grant(grant, now)

        logger.info(
            "Feature usage violation recorded",
            extra={
                "license_key_id": str(license_key.id),
                "feature_id": str(grant.feature_id),
                "consecutive_violations": grant.consecutive_violations,
            },
        )

        if (
            grant.consecutive_violations >= 2
            and previous_violation_at is not None
            and previous_violation_at >= window_start
        ):
            updated = updated.suspend_feature(grant.feature_id, now)
            if not updated.allowed_features:
                updated = replace(updated, status=LicenseStatus.SUSPENDED)
            logger.warning(
                "Feature disabled after repeated violations",
                extra={
                    "license_key_id": str(license_key.id),
                    "feature_id": str(grant.feature_id),
                    "license_status": updated.status.value,
                },
            )
            return UsageResult(
                updated,
                UsageOutcome.FEATURE_SUSPENDED,
                grant,
                changed=True,
                violation_recorded=True,
            )

        return UsageResult(
            updated,
            UsageOutcome.QUOTA_EXCEEDED,
            grant,
            changed=True,
            violation_recorded=True,
        )
