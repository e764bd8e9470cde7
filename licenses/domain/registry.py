"""
License lifecycle state machine.

States: inactive -> active -> {expired, suspended}. Upgrade may re-enter
from any state. Suspension is only entered through the entitlement
ledger's escalation path, never through a registry operation.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.clock import Clock, add_years
from core.domain.exceptions import (
    DomainValidationError,
    InvalidLicenseKeyError,
    LicenseAlreadyActiveError,
    LicenseSuspendedError,
)
from core.domain.value_objects import LicenseMode, LicenseStatus, PackageTier
from licenses.domain.key_generator import LicenseKeyGenerator
from licenses.domain.license_key import (
    FeatureGrant,
    FeatureGrantRequest,
    IssuedLicense,
    LicenseKey,
)

logger = logging.getLogger(__name__)


def refresh_status(license_key: LicenseKey, now: datetime) -> LicenseKey:
    """
    Normalize a key's status at read time.

    An active annual key whose expiry has passed becomes expired; a key
    that was never activated is inactive. Returns the same instance when
    nothing changes so callers can detect mutation with ``is``.

    Args:
        license_key: Key as loaded from storage
        now: Current time

    Returns:
        LicenseKey with a normalized status
    """
    if (
        license_key.status == LicenseStatus.ACTIVE
        and license_key.license_mode == LicenseMode.ANNUAL
        and license_key.expires_at is not None
        and license_key.expires_at < now
    ):
        return replace(license_key, status=LicenseStatus.EXPIRED, updated_at=now)
    if license_key.activated_at is None and license_key.status != LicenseStatus.INACTIVE:
        return replace(license_key, status=LicenseStatus.INACTIVE, updated_at=now)
    return license_key


def validate_duration(value, name: str = "duration") -> int:
    """Require a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationError(f"{name} must be an integer")
    if value < 0:
        raise DomainValidationError(f"{name} cannot be negative")
    return value


class LicenseRegistry:
    """
    Domain service owning license issuance, activation and upgrade.

    The registry is pure: it takes loaded aggregates and catalog data
    and returns new aggregates. Persistence and uniqueness of the
    owner/product pair are the repository's concern.
    """

    def __init__(self, key_generator: LicenseKeyGenerator, clock: Clock):
        self.key_generator = key_generator
        self.clock = clock

    def refresh_status(self, license_key: LicenseKey) -> LicenseKey:
        """Normalize status against the injected clock."""
        return refresh_status(license_key, self.clock.now())

    def verify(self, license_key: LicenseKey, raw_secret: Optional[str]) -> bool:
        """Check a raw secret against the key's verification hash."""
        return self.key_generator.verify(raw_secret, license_key.verification_hash)

    def issue(
        self,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        package_tier,
        license_mode,
        issued_duration: int,
        tier_feature_ids: Iterable[uuid.UUID],
        requested_grants: Optional[List[FeatureGrantRequest]] = None,
    ) -> IssuedLicense:
        """
        Issue a new inactive license key.

        Args:
            owner_id: Owning account UUID
            product_id: Product UUID
            package_tier: Tier (member or raw value)
            license_mode: Mode (member or raw value)
            issued_duration: Initial duration units
            tier_feature_ids: Catalog features belonging to the tier, in order
            requested_grants: Caller-supplied grants (used for perpetual mode only)

        Returns:
            IssuedLicense holding the key and its raw secret

        Raises:
            DomainValidationError: If tier, mode, duration or grants are invalid
        """
        package_tier = PackageTier.parse(package_tier)
        license_mode = LicenseMode.parse(license_mode)
        issued_duration = validate_duration(issued_duration)
        grants = self._build_grants(license_mode, list(tier_feature_ids), requested_grants)

        generated = self.key_generator.generate()
        license_key = LicenseKey.create(
            verification_hash=generated.verification_hash,
            owner_id=owner_id,
            product_id=product_id,
            package_tier=package_tier,
            license_mode=license_mode,
            issued_duration=issued_duration,
            grants=grants,
            now=self.clock.now(),
        )
        logger.debug(
            "Issued license key %s (%s/%s)",
            license_key.id,
            package_tier.value,
            license_mode.value,
        )
        return IssuedLicense(license_key=license_key, raw_secret=generated.raw_secret)

    def activate(self, license_key: LicenseKey, raw_secret: str) -> LicenseKey:
        """
        Activate a key after verifying its secret.

        Annual keys receive an expiry ``issued_duration`` years from now;
        perpetual keys never expire. An expired key is activated again
        with a fresh expiry.

        Args:
            license_key: Key to activate
            raw_secret: Secret supplied by the caller

        Returns:
            Activated LicenseKey

        Raises:
            InvalidLicenseKeyError: If the secret does not verify
            LicenseAlreadyActiveError: If the key is already active
            LicenseSuspendedError: If the key is suspended
        """
        now = self.clock.now()
        license_key = refresh_status(license_key, now)

        if not self.verify(license_key, raw_secret):
            raise InvalidLicenseKeyError()
        if license_key.status == LicenseStatus.ACTIVE:
            raise LicenseAlreadyActiveError()
        if license_key.status == LicenseStatus.SUSPENDED:
            raise LicenseSuspendedError()

        if license_key.is_perpetual:
            expires_at = None
        else:
            expires_at = add_years(now, license_key.issued_duration)

        return replace(
            license_key,
            status=LicenseStatus.ACTIVE,
            activated_at=now,
            expires_at=expires_at,
            updated_at=now,
        )

    def upgrade(
        self,
        license_key: LicenseKey,
        package_tier,
        license_mode,
        added_duration: int,
        tier_feature_ids: Iterable[uuid.UUID],
        requested_grants: Optional[List[FeatureGrantRequest]] = None,
    ) -> LicenseKey:
        """
        Change tier and mode, extend or reset duration and regenerate grants.

        Expired and inactive keys are reset to inactive with the added
        duration replacing the old one. Active and suspended keys keep
        their activation; annual mode extends the expiry by the added
        years and perpetual mode clears it.

        Args:
            license_key: Key to upgrade
            package_tier: New tier
            license_mode: New mode
            added_duration: Duration units to add (or to set, for reset keys)
            tier_feature_ids: Catalog features belonging to the new tier
            requested_grants: New grants for perpetual mode

        Returns:
            Upgraded LicenseKey

        Raises:
            DomainValidationError: If tier, mode, duration or grants are invalid
        """
        package_tier = PackageTier.parse(package_tier)
        license_mode = LicenseMode.parse(license_mode)
        added_duration = validate_duration(added_duration, "added duration")
        tier_feature_ids = list(tier_feature_ids)
        self._validate_requested_grants(tier_feature_ids, requested_grants)

        now = self.clock.now()
        license_key = refresh_status(license_key, now)

        if license_key.status in (LicenseStatus.EXPIRED, LicenseStatus.INACTIVE):
            upgraded = replace(
                license_key,
                status=LicenseStatus.INACTIVE,
                issued_duration=added_duration,
                activated_at=None,
                expires_at=None,
            )
        elif license_mode == LicenseMode.ANNUAL:
            upgraded = replace(
                license_key,
                issued_duration=license_key.issued_duration + added_duration,
                expires_at=add_years(license_key.expires_at or now, added_duration),
            )
        else:
            upgraded = replace(
                license_key,
                issued_duration=license_key.issued_duration + added_duration,
                expires_at=None,
            )

        upgraded = replace(
            upgraded,
            package_tier=package_tier,
            license_mode=license_mode,
            updated_at=now,
        )

        if license_mode == LicenseMode.ANNUAL:
            grants = [FeatureGrant.fresh(feature_id) for feature_id in tier_feature_ids]
            upgraded = upgraded.with_grants(grants, now, keep_disabled=False)
        elif requested_grants is not None:
            grants = [FeatureGrant.fresh(g.feature_id, g.limit) for g in requested_grants]
            upgraded = upgraded.with_grants(grants, now)

        if upgraded.status == LicenseStatus.SUSPENDED and upgraded.allowed_features:
            upgraded = replace(upgraded, status=LicenseStatus.ACTIVE)

        logger.debug(
            "Upgraded license key %s to %s/%s",
            upgraded.id,
            package_tier.value,
            license_mode.value,
        )
        return upgraded

    def _build_grants(
        self,
        license_mode: LicenseMode,
        tier_feature_ids: List[uuid.UUID],
        requested_grants: Optional[List[FeatureGrantRequest]],
    ) -> List[FeatureGrant]:
        """Derive initial grants for a new key."""
        self._validate_requested_grants(tier_feature_ids, requested_grants)
        if license_mode == LicenseMode.ANNUAL:
            return [FeatureGrant.fresh(feature_id) for feature_id in tier_feature_ids]
        return [FeatureGrant.fresh(g.feature_id, g.limit) for g in requested_grants or []]

    def _validate_requested_grants(
        self,
        tier_feature_ids: List[uuid.UUID],
        requested_grants: Optional[List[FeatureGrantRequest]],
    ) -> None:
        """Reject grants outside the tier, duplicated, or with a bad limit."""
        if not requested_grants:
            return
        allowed_ids = set(tier_feature_ids)
        seen = set()
        for grant in requested_grants:
            if grant.feature_id not in allowed_ids:
                raise DomainValidationError(
                    f"Feature {grant.feature_id} does not belong to the requested package tier"
                )
            if grant.feature_id in seen:
                raise DomainValidationError(f"Feature {grant.feature_id} is listed more than once")
            if grant.limit is not None:
                validate_duration(grant.limit, "limit")
            seen.add(grant.feature_id)
