"""
Product and Feature domain entities.

Products are what a license key is issued for; features belong to a
product and to exactly one package tier.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import PackageTier


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents a product that can be licensed.
    """

    id: uuid.UUID
    name: str
    description: str
    created_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Product name too long")


@dataclass(frozen=True)
class Feature:
    """
    Feature domain entity.

    A feature is licensed through the package tier it belongs to.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    package_tier: PackageTier
    description: str = ""
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate feature entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Feature name cannot be empty")
        if not self.product_id:
            raise ValueError("Product ID is required")

    def belongs_to(self, package_tier: PackageTier) -> bool:
        """Check tier membership."""
        return self.package_tier == package_tier
