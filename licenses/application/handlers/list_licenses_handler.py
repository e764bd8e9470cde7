"""
ListLicensesHandler.

Handler for listing all license keys.
"""
import logging
from typing import Dict, List

from accounts.ports.account_directory import AccountDirectory
from catalog.ports.product_catalog import ProductCatalog
from core.domain.events import EventBus
from core.domain.exceptions import ConcurrentUpdateError
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.dto.license_dto import LicenseKeySummaryDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.application.services.license_status_service import persist_refreshed
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

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

    async def handle(self, query: ListLicensesQuery) -> List[LicenseKeySummaryDTO]:
        """
        Handle list licenses query.

        Listing persists status normalization: each key whose status
        changed on read (an annual key past its expiry) is saved back.

        Args:
            query: ListLicensesQuery

        Returns:
            Summaries of every license key, statuses normalized
        """
        usernames: Dict = {}
        product_names: Dict = {}
        results = []

        for license_key in await self.license_key_repository.list_all():
            refreshed = self.registry.refresh_status(license_key)
            try:
                current = await persist_refreshed(
                    self.license_key_repository, self.event_bus, license_key, refreshed
                )
            except ConcurrentUpdateError:
                logger.info(
                    "Skipped status write for concurrently modified key",
                    extra={"license_key_id": str(license_key.id)},
                )
                current = refreshed

            if current.owner_id not in usernames:
                account = await self.account_directory.find_by_id(current.owner_id)
                usernames[current.owner_id] = str(account.username) if account else ""
            if current.product_id not in product_names:
                product = await self.product_catalog.find_product(current.product_id)
                product_names[current.product_id] = product.name if product else ""

            results.append(
                LicenseKeySummaryDTO.from_domain(
                    current,
                    owner_username=usernames[current.owner_id],
                    product_name=product_names[current.product_id],
                )
            )
        return results
