"""
RestoreFeatureHandler.

Handles the restore feature command.
"""
from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountNotFoundError,
    FeatureNotFoundError,
    LicenseNotFoundError,
)
from core.infrastructure.events import event_bus as default_event_bus
from entitlements.application.commands.restore_feature import RestoreFeatureCommand
from entitlements.application.dto.feature_dto import FeatureRestoreDTO
from entitlements.application.services.entitlement_evaluator import EntitlementEvaluator
from entitlements.domain.events import FeatureRestored
from licenses.application.services.license_status_service import publish_status_change
from licenses.ports.license_key_repository import LicenseKeyRepository


class RestoreFeatureHandler:
    """Handler for RestoreFeatureCommand."""

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

    async def handle(self, command: RestoreFeatureCommand) -> FeatureRestoreDTO:
        """
        Handle restore feature command.

        Args:
            command: RestoreFeatureCommand

        Returns:
            FeatureRestoreDTO with the reinstated limit

        Raises:
            AccountNotFoundError: If the owner does not exist
            FeatureNotFoundError: If the feature is not in the catalog or not disabled
            LicenseNotFoundError: If the owner holds no key for the feature's product
            FeatureStateConflictError: If the feature is already allowed
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

        restored = self.evaluator.restore(license_key, feature.id)
        saved = await self.license_key_repository.save(restored)
        await publish_status_change(self.event_bus, license_key, saved)

        await self.event_bus.publish(
            FeatureRestored(
                aggregate_id=str(saved.id),
                feature_id=feature.id,
                license_status=saved.status.value,
            )
        )

        grant = saved.find_grant(feature.id)
        return FeatureRestoreDTO(
            license_key_id=saved.id,
            feature_id=feature.id,
            limit=grant.limit,
            license_status=saved.status.value,
        )
