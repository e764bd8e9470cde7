"""
CheckLicenseQuery.

Query to check the status of an owner's license for a product.
"""
from dataclasses import dataclass

from core.domain.exceptions import DomainValidationError
from core.domain.value_objects import Username


@dataclass
class CheckLicenseQuery:
    """Query to check a license by owner and product name."""

    username: str
    product_name: str

    def __post_init__(self):
        """Validate required fields."""
        self.username = str(Username(self.username))
        if not self.product_name or not self.product_name.strip():
            raise DomainValidationError("Product name is required")
