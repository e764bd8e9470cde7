"""
Django implementation of ProductCatalog port.

This adapter converts Django ORM models to domain entities.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from catalog.domain.product import Feature, Product
from catalog.infrastructure.models import Feature as FeatureModel
from catalog.infrastructure.models import Product as ProductModel
from catalog.ports.product_catalog import ProductCatalog
from core.domain.value_objects import PackageTier


class DjangoProductCatalog(ProductCatalog):
    """Django ORM implementation of ProductCatalog."""

    def _product_to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            created_at=model.created_at,
        )

    def _feature_to_domain(self, model: FeatureModel) -> Feature:
        return Feature(
            id=model.id,
            product_id=model.product_id,
            name=model.name,
            package_tier=PackageTier.parse(model.package_tier),
            description=model.description,
            created_at=model.created_at,
        )

    @sync_to_async
    def find_product(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        try:
            return self._product_to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:
            return None

    @sync_to_async
    def find_product_by_name(self, name: str) -> Optional[Product]:
        """
        Find a product by name.

        Args:
            name: Product name

        Returns:
            Product entity or None if not found
        """
        try:
            return self._product_to_domain(ProductModel.objects.get(name=name))
        except ProductModel.DoesNotExist:
            return None

    @sync_to_async
    def find_feature(self, feature_id: uuid.UUID) -> Optional[Feature]:
        """
        Find a feature by ID.

        Args:
            feature_id: Feature UUID

        Returns:
            Feature entity or None if not found
        """
        try:
            return self._feature_to_domain(FeatureModel.objects.get(id=feature_id))
        except FeatureModel.DoesNotExist:
            return None

    @sync_to_async
    def list_tier_features(
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
        models = FeatureModel.objects.filter(
            product_id=product_id, package_tier=PackageTier.parse(package_tier).value
        )
        return [self._feature_to_domain(model) for model in models]
