"""
Entitlement evaluator.

Answers "is this usage allowed, and what changes?" for one request by
combining the registry's status normalization with the ledger's quota
accounting.
"""
import uuid
from dataclasses import replace

from core.domain.clock import Clock
from core.domain.exceptions import LicenseNotActiveError
from core.domain.value_objects import LicenseStatus
from entitlements.domain.ledger import FeatureEntitlementLedger, UsageResult
from licenses.domain.license_key import LicenseKey
from licenses.domain.registry import refresh_status

NOT_ACTIVE_MESSAGES = {
    LicenseStatus.INACTIVE: "The license key has not been activated",
    LicenseStatus.EXPIRED: "The license key has expired",
    LicenseStatus.SUSPENDED: "The license key is suspended",
}


class EntitlementEvaluator:
    """Façade over the ledger for a single usage or restore request."""

    def __init__(self, ledger: FeatureEntitlementLedger, clock: Clock):
        self.ledger = ledger
        self.clock = clock

    def evaluate_usage(self, license_key: LicenseKey, feature_id: uuid.UUID) -> UsageResult:
        """
        Record one use of a feature on a key.

        Args:
            license_key: Key as loaded from storage
            feature_id: Feature being used

        Returns:
            UsageResult; ``changed`` also covers a status normalization

        Raises:
            LicenseNotActiveError: If the normalized key is not active
            FeatureNotEntitledError: If the key holds no grant for the feature
        """
        now = self.clock.now()
        refreshed = refresh_status(license_key, now)
        if refreshed.status != LicenseStatus.ACTIVE:
            raise LicenseNotActiveError(
                NOT_ACTIVE_MESSAGES.get(refreshed.status, "The license key is not active"),
                status=refreshed.status.value,
            )

        result = self.ledger.record_usage(refreshed, feature_id, now)
        if refreshed is not license_key and not result.changed:
            return replace(result, changed=True)
        return result

    def restore(self, license_key: LicenseKey, feature_id: uuid.UUID) -> LicenseKey:
        """
        Restore a disabled feature.

        Args:
            license_key: Key as loaded from storage
            feature_id: Feature to restore

        Returns:
            Updated LicenseKey

        Raises:
            FeatureNotFoundError: If the feature is not disabled
            FeatureStateConflictError: If the feature is already allowed
        """
        now = self.clock.now()
        return self.ledger.restore(refresh_status(license_key, now), feature_id, now)
