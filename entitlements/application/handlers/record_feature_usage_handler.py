"""
RecordFeatureUsageHandler.

Handles the record feature usage command.
"""
import logging

from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountNotFoundError,
    FeatureNotFoundError,
    FeatureSuspendedError,
    LicenseNotFoundError,
    QuotaExceededError,
)
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import feature_usage_total
from entitlements.application.commands.record_feature_usage import RecordFeatureUsageCommand
from entitlements.application.dto.feature_dto import FeatureUsageDTO
from entitlements.application.services.entitlement_evaluator import EntitlementEvaluator
from entitlements.domain.events import FeatureSuspended, FeatureViolationRecorded
from entitlements.domain.ledger import UsageOutcome
from licenses.application.services.license_status_service import publish_status_change
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class RecordFeatureUsageHandler:
    """Handler for RecordFeatureUsageCommand."""

    def __init__(
        self,
        account_directory: AccountDirectory,
        product_catalog: ProductCatalog,
        license_key_repository: LicenseKeyRepository,
        evaluator: EntitlementEvaluator,
        event_bus: EventBus = None,
    ):
        """Initialize handler with ports and the evaluator."""
        self.account_directory = account_directory
        self.product_catalog = product_catalog
        self.license_key_repository = license_key_repository
        self.evaluator = evaluator
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: RecordFeatureUsageCommand) -> FeatureUsageDTO:
        """
        Handle record feature usage command.

        Changes made by a denied attempt (a recorded violation or a
        suspension) are persisted before the denial is raised.

        Args:
            command: RecordFeatureUsageCommand

        Returns:
            FeatureUsageDTO for an accepted usage

        Raises:
            AccountNotFoundError: If the owner does not exist
            FeatureNotFoundError: If the feature is not in the catalog
            LicenseNotFoundError: If the owner holds no key for the feature's product
            LicenseNotActiveError: If the key is not active
            FeatureNotEntitledError: If the key holds no grant for the feature
            QuotaExceededError: If the daily ceiling was passed
            FeatureSuspendedError: If the feature is disabled
            ConcurrentUpdateError: If the key changed while recording
        """
        account = await self.account_directory.find_by_username(command.username)
        if not account:
            raise AccountNotFoundError(f"Account {command.username} not found")

        feature = await self.product_catalog.find_feature(command.feature_id)
        if not feature:
            raise FeatureNotFoundError(f"Feature {command.feature_id} not found")

        license_key = await self.license_key_repository.find_by_owner_and_product(
            account.id, feature.product_id
        )
        if not license_key:
            raise LicenseNotFoundError("No license key found for this user and feature")

        result = self.evaluator.evaluate_usage(license_key, feature.id)
        feature_usage_total.labels(outcome=result.outcome.value).inc()

        saved = result.license_key
        if result.changed:
            saved = await self.license_key_repository.save(result.license_key)
            await publish_status_change(self.event_bus, license_key, saved)

        if result.violation_recorded:
            await self.event_bus.publish(
                FeatureViolationRecorded(
                    aggregate_id=str(saved.id),
                    feature_id=feature.id,
                    consecutive_violations=result.grant.consecutive_violations,
                )
            )

        if result.outcome == UsageOutcome.FEATURE_SUSPENDED:
            if result.violation_recorded:
                await self.event_bus.publish(
                    FeatureSuspended(
                        aggregate_id=str(saved.id),
                        feature_id=feature.id,
                        license_status=saved.status.value,
                    )
                )
            raise FeatureSuspendedError()

        if result.outcome == UsageOutcome.QUOTA_EXCEEDED:
            raise QuotaExceededError()

        grant = saved.find_grant(feature.id)
        return FeatureUsageDTO(
            license_key_id=saved.id,
            feature_id=feature.id,
            outcome=result.outcome.value,
            usage_count=grant.usage_count if grant else None,
            limit=grant.limit if grant else None,
        )
