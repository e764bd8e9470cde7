"""
UpgradeLicenseCommand.

Command to change a license key's tier, mode and duration.
"""
import uuid
from dataclasses import dataclass
from typing import List, Optional

from core.domain.value_objects import LicenseMode, PackageTier
from licenses.domain.license_key import FeatureGrantRequest
from licenses.domain.registry import validate_duration


@dataclass
class UpgradeLicenseCommand:
    """Command to upgrade a license key."""

    license_key_id: uuid.UUID
    package_tier: PackageTier
    license_mode: LicenseMode
    added_duration: int
    allowed_features: Optional[List[FeatureGrantRequest]] = None

    def __post_init__(self):
        """Coerce and validate fields."""
        self.package_tier = PackageTier.parse(self.package_tier)
        self.license_mode = LicenseMode.parse(self.license_mode)
        self.added_duration = validate_duration(self.added_duration, "added duration")
