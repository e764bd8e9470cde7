"""
ActivateLicenseCommand.

Command to activate an owner's license key for a product.
"""
from dataclasses import dataclass

from core.domain.exceptions import DomainValidationError
from core.domain.value_objects import Username


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license key with its raw secret."""

    username: str
    product_name: str
    license_secret: str

    def __post_init__(self):
        """Validate required fields."""
        self.username = str(Username(self.username))
        if not self.product_name or not self.product_name.strip():
            raise DomainValidationError("Product name is required")
        if not self.license_secret or not self.license_secret.strip():
            raise DomainValidationError("License key is required")
        self.license_secret = self.license_secret.strip()
