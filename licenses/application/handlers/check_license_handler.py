"""
CheckLicenseHandler.

Handler for the check license query.
"""
from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountNotFoundError,
    InvalidLicenseKeyError,
    LicenseNotFoundError,
    ProductNotFoundError,
)
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.dto.license_dto import LicenseCheckDTO
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.application.services.license_status_service import persist_refreshed
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository


class CheckLicenseHandler:
    """Handler for CheckLicenseQuery."""

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

    async def handle(self, query: CheckLicenseQuery) -> LicenseCheckDTO:
        """
        Handle check license query.

        The secret recorded for the owner's product must still verify
        against the key's hash.

        Args:
            query: CheckLicenseQuery

        Returns:
            LicenseCheckDTO with the normalized status

        Raises:
            AccountNotFoundError: If the owner does not exist
            ProductNotFoundError: If the product does not exist
            LicenseNotFoundError: If the owner holds no key for the product
            InvalidLicenseKeyError: If the recorded secret does not verify
        """
        account = await self.account_directory.find_by_username(query.username)
        if not account:
            raise AccountNotFoundError(f"Account {query.username} not found")

        product = await self.product_catalog.find_product_by_name(query.product_name)
        if not product:
            raise ProductNotFoundError(f"Product {query.product_name} not found")

        license_key = await self.license_key_repository.find_by_owner_and_product(account.id, product.id)
        if not license_key:
            raise LicenseNotFoundError("No license key found for this user and product")

        if not self.registry.verify(license_key, account.license_secret_for(product.id)):
            raise InvalidLicenseKeyError()

        refreshed = self.registry.refresh_status(license_key)
        saved = await persist_refreshed(
            self.license_key_repository, self.event_bus, license_key, refreshed
        )

        return LicenseCheckDTO(
            license_key_id=saved.id,
            product_name=product.name,
            status=saved.status.value,
            expires_at=saved.expires_at,
        )
