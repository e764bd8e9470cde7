"""
LicenseKey domain entity.

This is the root aggregate of the licensing domain: one owner's
entitlement to one product, together with the per-feature grants
nested inside it. It contains business logic and is independent
of infrastructure.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from core.domain.value_objects import GrantStatus, LicenseMode, LicenseStatus, PackageTier


@dataclass(frozen=True)
class FeatureGrant:
    """
    Entitlement record for a single feature.

    ``limit`` of None means the feature is unmetered. ``usage_count``
    is only meaningful relative to the calendar day of ``last_used_at``.
    """

    feature_id: uuid.UUID
    limit: Optional[int] = None
    usage_count: int = 0
    first_used_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
    last_violation_at: Optional[datetime] = None
    consecutive_violations: int = 0
    status: GrantStatus = GrantStatus.ACTIVE

    def __post_init__(self):
        """Validate feature grant."""
        if self.limit is not None and self.limit < 0:
            raise ValueError("Feature limit cannot be negative")
        if self.usage_count < 0:
            raise ValueError("Usage count cannot be negative")
        if self.consecutive_violations < 0:
            raise ValueError("Consecutive violations cannot be negative")

    @classmethod
    def fresh(cls, feature_id: uuid.UUID, limit: Optional[int] = None) -> "FeatureGrant":
        """Create a grant with zeroed counters."""
        return cls(feature_id=feature_id, limit=limit)

    @property
    def is_unlimited(self) -> bool:
        """Check if the grant carries no usage ceiling."""
        return self.limit is None


@dataclass(frozen=True)
class DisabledFeatureRecord:
    """A grant removed after repeated violations, keeping its original limit."""

    feature_id: uuid.UUID
    limit: Optional[int] = None

    def restore(self) -> FeatureGrant:
        """Return a fresh grant with the preserved limit."""
        return FeatureGrant.fresh(self.feature_id, self.limit)


@dataclass(frozen=True)
class FeatureGrantRequest:
    """Caller-supplied grant for a perpetual license."""

    feature_id: uuid.UUID
    limit: Optional[int] = None


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    Holds the lifecycle fields of a license together with two
    insertion-ordered collections keyed by feature id. A feature
    id appears in at most one of ``allowed_features`` and
    ``disabled_features``. The raw secret is never part of the
    aggregate; only its verification hash is.
    """

    id: uuid.UUID
    verification_hash: str
    owner_id: uuid.UUID
    product_id: uuid.UUID
    package_tier: PackageTier
    license_mode: LicenseMode
    status: LicenseStatus
    issued_duration: int
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    allowed_features: Dict[uuid.UUID, FeatureGrant] = field(default_factory=dict)
    disabled_features: Dict[uuid.UUID, DisabledFeatureRecord] = field(default_factory=dict)
    version: int = 0

    def __post_init__(self):
        """Validate license key entity."""
        if not self.verification_hash:
            raise ValueError("Verification hash is required")
        if self.issued_duration < 0:
            raise ValueError("Issued duration cannot be negative")
        overlap = self.allowed_features.keys() & self.disabled_features.keys()
        if overlap:
            raise ValueError(
                "Features cannot be both allowed and disabled: "
                + ", ".join(sorted(str(feature_id) for feature_id in overlap))
            )

    @classmethod
    def create(
        cls,
        verification_hash: str,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        package_tier: PackageTier,
        license_mode: LicenseMode,
        issued_duration: int,
        grants: List[FeatureGrant],
        now: datetime,
        license_key_id: Optional[uuid.UUID] = None,
    ) -> "LicenseKey":
        """
        Create a new, inactive LicenseKey entity.

        Args:
            verification_hash: Salted hash of the raw secret
            owner_id: Owning account UUID
            product_id: Licensed product UUID
            package_tier: Package tier
            license_mode: Perpetual or annual
            issued_duration: Initial duration units
            grants: Initial feature grants, in order
            now: Creation time
            license_key_id: Optional UUID (generated if not provided)

        Returns:
            LicenseKey entity instance
        """
        return cls(
            id=license_key_id or uuid.uuid4(),
            verification_hash=verification_hash,
            owner_id=owner_id,
            product_id=product_id,
            package_tier=package_tier,
            license_mode=license_mode,
            status=LicenseStatus.INACTIVE,
            issued_duration=issued_duration,
            activated_at=None,
            expires_at=None,
            created_at=now,
            updated_at=now,
            allowed_features={grant.feature_id: grant for grant in grants},
        )

    @property
    def is_perpetual(self) -> bool:
        """Check if the license never expires by time."""
        return self.license_mode == LicenseMode.PERPETUAL

    @property
    def grants(self) -> List[FeatureGrant]:
        """Allowed grants in insertion order."""
        return list(self.allowed_features.values())

    def find_grant(self, feature_id: uuid.UUID) -> Optional[FeatureGrant]:
        """Return the allowed grant for a feature, if any."""
        return self.allowed_features.get(feature_id)

    def find_disabled(self, feature_id: uuid.UUID) -> Optional[DisabledFeatureRecord]:
        """Return the disabled record for a feature, if any."""
        return self.disabled_features.get(feature_id)

    def with_grant(self, grant: FeatureGrant, now: datetime) -> "LicenseKey":
        """Return a copy with one allowed grant replaced in place."""
        if grant.feature_id not in self.allowed_features:
            raise ValueError(f"Feature {grant.feature_id} is not allowed on this key")
        allowed = dict(self.allowed_features)
        allowed[grant.feature_id] = grant
        return replace(self, allowed_features=allowed, updated_at=now)

    def with_grants(
        self,
        grants: List[FeatureGrant],
        now: datetime,
        keep_disabled: bool = True,
    ) -> "LicenseKey":
        """
        Return a copy whose allowed grants are replaced wholesale.

        Disabled records for re-granted features are dropped; all other
        disabled records are kept unless ``keep_disabled`` is False.
        """
        allowed = {grant.feature_id: grant for grant in grants}
        if keep_disabled:
            disabled = {
                feature_id: record
                for feature_id, record in self.disabled_features.items()
                if feature_id not in allowed
            }
        else:
            disabled = {}
        return replace(
            self,
            allowed_features=allowed,
            disabled_features=disabled,
            updated_at=now,
        )

    def suspend_feature(self, feature_id: uuid.UUID, now: datetime) -> "LicenseKey":
        """
        Move an allowed grant to the disabled collection.

        The grant's limit is preserved on the disabled record.
        """
        grant = self.allowed_features.get(feature_id)
        if grant is None:
            raise ValueError(f"Feature {feature_id} is not allowed on this key")
        allowed = {k: v for k, v in self.allowed_features.items() if k != feature_id}
        disabled = dict(self.disabled_features)
        disabled[feature_id] = DisabledFeatureRecord(feature_id=feature_id, limit=grant.limit)
        return replace(
            self,
            allowed_features=allowed,
            disabled_features=disabled,
            updated_at=now,
        )

    def restore_feature(self, feature_id: uuid.UUID, now: datetime) -> "LicenseKey":
        """
        Move a disabled record back to the allowed collection with fresh counters.
        """
        record = self.disabled_features.get(feature_id)
        if record is None:
            raise ValueError(f"Feature {feature_id} is not disabled on this key")
        disabled = {k: v for k, v in self.disabled_features.items() if k != feature_id}
        allowed = dict(self.allowed_features)
        allowed[feature_id] = record.restore()
        return replace(
            self,
            allowed_features=allowed,
            disabled_features=disabled,
            updated_at=now,
        )


@dataclass(frozen=True)
class IssuedLicense:
    """A newly issued key together with its raw secret, shown once."""

    license_key: LicenseKey
    raw_secret: str
