"""
UpgradeLicenseHandler.

Handles the upgrade license command.
"""
from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.commands.upgrade_license import UpgradeLicenseCommand
from licenses.application.dto.license_dto import LicenseKeySummaryDTO
from licenses.domain.events import LicenseUpgraded
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository


class UpgradeLicenseHandler:
    """Handler for UpgradeLicenseCommand."""

    def __init__(
        self,
        account_directory: AccountDirectory,
        product_catalog: ProductCatalog,
        license_key_repository: LicenseKeyRepository,
        registry: LicenseRegistry,
        event_bus: EventBus = None,
    ):
        """Initialize handler with ports and domain services."""
        self.account_directory = account_directory
        self.product_catalog = product_catalog
        self.license_key_repository = license_key_repository
        self.registry = registry
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: UpgradeLicenseCommand) -> LicenseKeySummaryDTO:
        """
        Handle upgrade license command.

        Args:
            command: UpgradeLicenseCommand

        Returns:
            LicenseKeySummaryDTO of the upgraded key

        Raises:
            LicenseNotFoundError: If the key does not exist
            DomainValidationError: If a grant does not belong to the new tier
            ConcurrentUpdateError: If the key changed while upgrading
        """
        license_key = await self.license_key_repository.find_by_id(command.license_key_id)
        if not license_key:
            raise LicenseNotFoundError(f"License key {command.license_key_id} not found")

        tier_features = await self.product_catalog.list_tier_features(
            license_key.product_id, command.package_tier
        )
        upgraded = self.registry.upgrade(
            license_key,
            package_tier=command.package_tier,
            license_mode=command.license_mode,
            added_duration=command.added_duration,
            tier_feature_ids=[feature.id for feature in tier_features],
            requested_grants=command.allowed_features,
        )
        saved = await self.license_key_repository.save(upgraded)

        await self.event_bus.publish(
            LicenseUpgraded(
                aggregate_id=str(saved.id),
                previous_status=license_key.status.value,
                status=saved.status.value,
                package_tier=saved.package_tier.value,
                license_mode=saved.license_mode.value,
                expires_at=saved.expires_at,
            )
        )

        account = await self.account_directory.find_by_id(saved.owner_id)
        product = await self.product_catalog.find_product(saved.product_id)
        return LicenseKeySummaryDTO.from_domain(
            saved,
            owner_username=str(account.username) if account else "",
            product_name=product.name if product else "",
        )
