"""
ActivateLicenseHandler.

Handles the activate license command.
"""
from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountNotFoundError,
    LicenseNotFoundError,
    ProductNotFoundError,
)
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.dto.license_dto import ActivationResultDTO
from licenses.domain.events import LicenseActivated
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

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

    async def handle(self, command: ActivateLicenseCommand) -> ActivationResultDTO:
        """
        Handle activate license command.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivationResultDTO with activation and expiry times

        Raises:
            AccountNotFoundError: If the owner does not exist
            ProductNotFoundError: If the product does not exist
            LicenseNotFoundError: If the owner holds no key for the product
            InvalidLicenseKeyError: If the secret does not verify
            LicenseAlreadyActiveError: If the key is already active
        """
        account = await self.account_directory.find_by_username(command.username)
        if not account:
            raise AccountNotFoundError(f"Account {command.username} not found")

        product = await self.product_catalog.find_product_by_name(command.product_name)
        if not product:
            raise ProductNotFoundError(f"Product {command.product_name} not found")

        license_key = await self.license_key_repository.find_by_owner_and_product(account.id, product.id)
        if not license_key:
            raise LicenseNotFoundError("No license key found for this user and product")

        activated = self.registry.activate(license_key, command.license_secret)
        saved = await self.license_key_repository.save(activated)

        await self.event_bus.publish(
            LicenseActivated(
                aggregate_id=str(saved.id),
                owner_id=account.id,
                license_mode=saved.license_mode.value,
                expires_at=saved.expires_at,
            )
        )

        return ActivationResultDTO(
            license_key_id=saved.id,
            status=saved.status.value,
            activated_at=saved.activated_at,
            expires_at=saved.expires_at,
        )
