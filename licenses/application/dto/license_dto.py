"""
License DTOs for API responses.

No DTO carries the verification hash; only the issue response carries
the raw secret.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license_key import LicenseKey


@dataclass
class FeatureGrantDTO:
    """DTO for an allowed feature grant."""

    feature_id: uuid.UUID
    limit: Optional[int]
    usage_count: int
    status: str
    consecutive_violations: int
    first_used_at: Optional[datetime]
    last_used_at: Optional[datetime]
    last_violation_at: Optional[datetime]


@dataclass
class DisabledFeatureDTO:
    """DTO for a disabled feature record."""

    feature_id: uuid.UUID
    limit: Optional[int]


@dataclass
class LicenseKeySummaryDTO:
    """DTO for license key information."""

    id: uuid.UUID
    owner_id: uuid.UUID
    owner_username: str
    product_id: uuid.UUID
    product_name: str
    package_tier: str
    license_mode: str
    is_perpetual: bool
    status: str
    issued_duration: int
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    allowed_features: List[FeatureGrantDTO]
    disabled_features: List[DisabledFeatureDTO]

    @classmethod
    def from_domain(
        cls, license_key: LicenseKey, owner_username: str = "", product_name: str = ""
    ) -> "LicenseKeySummaryDTO":
        """Build the summary of a license key."""
        return cls(
            id=license_key.id,
            owner_id=license_key.owner_id,
            owner_username=owner_username,
            product_id=license_key.product_id,
            product_name=product_name,
            package_tier=license_key.package_tier.value,
            license_mode=license_key.license_mode.value,
            is_perpetual=license_key.is_perpetual,
            status=license_key.status.value,
            issued_duration=license_key.issued_duration,
            activated_at=license_key.activated_at,
            expires_at=license_key.expires_at,
            created_at=license_key.created_at,
            updated_at=license_key.updated_at,
            allowed_features=[
                FeatureGrantDTO(
                    feature_id=grant.feature_id,
                    limit=grant.limit,
                    usage_count=grant.usage_count,
                    status=grant.status.value,
                    consecutive_violations=grant.consecutive_violations,
                    first_used_at=grant.first_used_at,
                    last_used_at=grant.last_used_at,
                    last_violation_at=grant.last_violation_at,
                )
                for grant in license_key.allowed_features.values()
            ],
            disabled_features=[
                DisabledFeatureDTO(feature_id=record.feature_id, limit=record.limit)
                for record in license_key.disabled_features.values()
            ],
        )


@dataclass
class IssueLicenseResponseDTO:
    """DTO for issue license response."""

    license: LicenseKeySummaryDTO
    license_secret: str


@dataclass
class ActivationResultDTO:
    """DTO for activate license response."""

    license_key_id: uuid.UUID
    status: str
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]


@dataclass
class LicenseCheckDTO:
    """DTO for check license response."""

    license_key_id: uuid.UUID
    product_name: str
    status: str
    expires_at: Optional[datetime]
