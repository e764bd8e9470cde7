"""
Account domain entity.

An account owns license keys. For every purchased product it keeps the
raw license secret handed out at issue time, which is what later
license checks verify against the key's stored hash.
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from core.domain.value_objects import Username


@dataclass(frozen=True)
class Account:
    """
    Account domain entity.

    Represents a license owner as resolved from the identity directory.
    """

    id: uuid.UUID
    username: Username
    license_secrets: Dict[uuid.UUID, str] = field(default_factory=dict)

    def license_secret_for(self, product_id: uuid.UUID) -> Optional[str]:
        """
        Return the recorded license secret for a product.

        Args:
            product_id: Product UUID

        Returns:
            Raw secret or None if the account holds no license for the product
        """
        return self.license_secrets.get(product_id)

    def owns_product(self, product_id: uuid.UUID) -> bool:
        """Check if a license secret is recorded for a product."""
        return product_id in self.license_secrets
