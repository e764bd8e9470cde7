"""
IssueLicenseCommand.

Command to issue a license key for an owner and product.
"""
import uuid
from dataclasses import dataclass
from typing import List, Optional

from core.domain.value_objects import LicenseMode, PackageTier, Username
from licenses.domain.license_key import FeatureGrantRequest
from licenses.domain.registry import validate_duration


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a new license key.

    ``allowed_features`` is only used for perpetual licenses; annual
    licenses are granted every feature of their tier.
    """

    username: str
    product_id: uuid.UUID
    package_tier: PackageTier
    license_mode: LicenseMode
    issued_duration: int
    allowed_features: Optional[List[FeatureGrantRequest]] = None

    def __post_init__(self):
        """Coerce and validate fields."""
        self.username = str(Username(self.username))
        self.package_tier = PackageTier.parse(self.package_tier)
        self.license_mode = LicenseMode.parse(self.license_mode)
        self.issued_duration = validate_duration(self.issued_duration, "issued duration")
