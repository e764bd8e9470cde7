"""
LicenseKey repository port (interface).

This defines the contract for license key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from licenses.domain.license_key import LicenseKey


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey aggregates.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Each aggregate, including both feature collections, is
    persisted as one unit.
    """

    @abstractmethod
    async def add(self, license_key: LicenseKey, raw_secret: str) -> LicenseKey:
        """
        Insert a new license key and record its raw secret for the owner.

        Both writes happen atomically.

        Args:
            license_key: New LicenseKey aggregate
            raw_secret: Raw secret to record on the owner's product association

        Returns:
            Stored license key

        Raises:
            DuplicateLicenseError: If the owner already holds a key for the product
            DuplicateLicenseSecretError: If the raw secret collides with a stored one
        """
        pass

    @abstractmethod
    async def save(self, license_key: LicenseKey) -> LicenseKey:
        """
        Persist changes to an existing license key.

        The write only succeeds if the stored version still equals
        ``license_key.version``.

        Args:
            license_key: Mutated LicenseKey aggregate

        Returns:
            Stored license key with its version incremented

        Raises:
            ConcurrentUpdateError: If the key was modified since it was loaded
            LicenseNotFoundError: If the key no longer exists
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_owner_and_product(
        self, owner_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        """
        Find the license key an owner holds for a product.

        Args:
            owner_id: Account UUID
            product_id: Product UUID

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[LicenseKey]:
        """
        List all license keys, newest first.

        Returns:
            List of LicenseKey entities
        """
        pass
