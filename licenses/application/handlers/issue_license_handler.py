"""
IssueLicenseHandler.

Handles the issue license command.
"""
import logging

from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import (
    AccountNotFoundError,
    DuplicateLicenseError,
    DuplicateLicenseSecretError,
    ProductNotFoundError,
)
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssueLicenseResponseDTO, LicenseKeySummaryDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        account_directory: AccountDirectory,
        product_catalog: ProductCatalog,
        license_key_repository: LicenseKeyRepository,
        registry: LicenseRegistry,
        max_generation_attempts: int = 5,
        event_bus: EventBus = None,
    ):
        """Initialize handler with ports and domain services."""
        self.account_directory = account_directory
        self.product_catalog = product_catalog
        self.license_key_repository = license_key_repository
        self.registry = registry
        self.max_generation_attempts = max_generation_attempts
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: IssueLicenseCommand) -> IssueLicenseResponseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssueLicenseResponseDTO with the key summary and its raw secret

        Raises:
            AccountNotFoundError: If the owner does not exist
            ProductNotFoundError: If the product does not exist
            DuplicateLicenseError: If the owner already holds a key for the product
            DuplicateLicenseSecretError: If no unique secret could be generated
            DomainValidationError: If the requested grants are invalid
        """
        account = await self.account_directory.find_by_username(command.username)
        if not account:
            raise AccountNotFoundError(f"Account {command.username} not found")

        product = await self.product_catalog.find_product(command.product_id)
        if not product:
            raise ProductNotFoundError(f"Product {command.product_id} not found")

        existing = await self.license_key_repository.find_by_owner_and_product(account.id, product.id)
        if existing:
            raise DuplicateLicenseError()

        tier_features = await self.product_catalog.list_tier_features(product.id, command.package_tier)
        tier_feature_ids = [feature.id for feature in tier_features]

        stored = None
        for attempt in range(1, self.max_generation_attempts + 1):
            issued = self.registry.issue(
                owner_id=account.id,
                product_id=product.id,
                package_tier=command.package_tier,
                license_mode=command.license_mode,
                issued_duration=command.issued_duration,
                tier_feature_ids=tier_feature_ids,
                requested_grants=command.allowed_features,
            )
            try:
                stored = await self.license_key_repository.add(issued.license_key, issued.raw_secret)
                break
            except DuplicateLicenseSecretError:
                logger.warning(
                    "License secret collision, regenerating",
                    extra={"attempt": attempt, "product_id": str(product.id)},
                )
        if stored is None:
            raise DuplicateLicenseSecretError("Could not generate a unique license key")

        await self.event_bus.publish(
            LicenseIssued(
                aggregate_id=str(stored.id),
                owner_id=account.id,
                product_id=product.id,
                package_tier=stored.package_tier.value,
                license_mode=stored.license_mode.value,
            )
        )

        return IssueLicenseResponseDTO(
            license=LicenseKeySummaryDTO.from_domain(stored, str(account.username), product.name),
            license_secret=issued.raw_secret,
        )
