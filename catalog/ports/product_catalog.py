"""
Product catalog port (interface).

This defines the read contract the licensing modules need from the
catalog. Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from catalog.domain.product import Feature, Product
from core.domain.value_objects import PackageTier


class ProductCatalog(ABC):
    """
    Abstract read-only catalog of products and features.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_product(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def find_product_by_name(self, name: str) -> Optional[Product]:
        """
        Find a product by its unique name.

        Args:
            name: Product name

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def find_feature(self, feature_id: uuid.UUID) -> Optional[Feature]:
        """
        Find a feature by ID.

        Args:
            feature_id: Feature UUID

        Returns:
            Feature entity or None if not found
        """
        pass

    @abstractmethod
    async def list_tier_features(
        self, product_id: uuid.UUID, package_tier: PackageTier
    ) -> List[Feature]:
        """
        List the features of a product that belong to a package tier.

        Args:
            product_id: Product UUID
            package_tier: Package tier

        Returns:
            Features in catalog order
        """
        pass
