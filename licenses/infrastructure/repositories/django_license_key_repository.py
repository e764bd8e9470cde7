"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import F

from accounts.infrastructure.models import ProductLicense
from core.domain.exceptions import (
    ConcurrentUpdateError,
    DuplicateLicenseError,
    DuplicateLicenseSecretError,
    LicenseNotFoundError,
)
from core.domain.value_objects import GrantStatus, LicenseMode, LicenseStatus, PackageTier
from licenses.domain.license_key import DisabledFeatureRecord, FeatureGrant, LicenseKey
from licenses.infrastructure.models import LicenseKey as LicenseKeyModel
from licenses.ports.license_key_repository import LicenseKeyRepository


def _dt_to_json(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dt_from_json(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def grant_to_json(grant: FeatureGrant) -> Dict[str, Any]:
    """Serialize a grant for the JSON column."""
    return {
        "feature_id": str(grant.feature_id),
        "limit": grant.limit,
        "usage_count": grant.usage_count,
        "first_used_at": _dt_to_json(grant.first_used_at),
        "last_used_at": _dt_to_json(grant.last_used_at),
        "last_violation_at": _dt_to_json(grant.last_violation_at),
        "consecutive_violations": grant.consecutive_violations,
        "status": grant.status.value,
    }


def grant_from_json(data: Dict[str, Any]) -> FeatureGrant:
    """Deserialize a grant from the JSON column."""
    return FeatureGrant(
        feature_id=uuid.UUID(data["feature_id"]),
        limit=data.get("limit"),
        usage_count=data.get("usage_count", 0),
        first_used_at=_dt_from_json(data.get("first_used_at")),
        last_used_at=_dt_from_json(data.get("last_used_at")),
        last_violation_at=_dt_from_json(data.get("last_violation_at")),
        consecutive_violations=data.get("consecutive_violations", 0),
        status=GrantStatus.parse(data.get("status", GrantStatus.ACTIVE.value)),
    )


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """
    Django ORM implementation of LicenseKeyRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to column values
    3. Implements versioned saves and atomic issuance
    """

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        allowed = [grant_from_json(item) for item in model.allowed_features or []]
        disabled = [
            DisabledFeatureRecord(feature_id=uuid.UUID(item["feature_id"]), limit=item.get("limit"))
            for item in model.disabled_features or []
        ]
        return LicenseKey(
            id=model.id,
            verification_hash=model.verification_hash,
            owner_id=model.owner_id,
            product_id=model.product_id,
            package_tier=PackageTier.parse(model.package_tier),
            license_mode=LicenseMode.parse(model.license_mode),
            status=LicenseStatus.parse(model.status),
            issued_duration=model.issued_duration,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            allowed_features={grant.feature_id: grant for grant in allowed},
            disabled_features={record.feature_id: record for record in disabled},
            version=model.version,
        )

    def _to_fields(self, license_key: LicenseKey) -> Dict[str, Any]:
        """
        Convert the mutable part of a domain entity to column values.

        Args:
            license_key: LicenseKey domain entity

        Returns:
            Column values for insert or update
        """
        return {
            "verification_hash": license_key.verification_hash,
            "package_tier": license_key.package_tier.value,
            "license_mode": license_key.license_mode.value,
            "status": license_key.status.value,
            "issued_duration": license_key.issued_duration,
            "activated_at": license_key.activated_at,
            "expires_at": license_key.expires_at,
            "allowed_features": [grant_to_json(g) for g in license_key.allowed_features.values()],
            "disabled_features": [
                {"feature_id": str(record.feature_id), "limit": record.limit}
                for record in license_key.disabled_features.values()
            ],
            "updated_at": license_key.updated_at,
        }

    @sync_to_async
    def add(self, license_key: LicenseKey, raw_secret: str) -> LicenseKey:
        """
        Insert a new license key and the owner's secret record atomically.

        Args:
            license_key: New LicenseKey aggregate
            raw_secret: Raw secret issued with the key

        Returns:
            Stored license key

        Raises:
            DuplicateLicenseError: If the owner already holds a key for the product
            DuplicateLicenseSecretError: If the raw secret is already recorded
        """
        if ProductLicense.objects.filter(license_secret=raw_secret).exists():
            raise DuplicateLicenseSecretError()
        try:
            with transaction.atomic():
                model = LicenseKeyModel.objects.create(
                    id=license_key.id,
                    owner_id=license_key.owner_id,
                    product_id=license_key.product_id,
                    created_at=license_key.created_at,
                    version=0,
                    **self._to_fields(license_key),
                )
                ProductLicense.objects.update_or_create(
                    account_id=license_key.owner_id,
                    product_id=license_key.product_id,
                    defaults={"license_secret": raw_secret},
                )
        except IntegrityError as exc:
            if ProductLicense.objects.filter(license_secret=raw_secret).exists():
                raise DuplicateLicenseSecretError() from exc
            raise DuplicateLicenseError() from exc
        return self._to_domain(model)

    @sync_to_async
    def save(self, license_key: LicenseKey) -> LicenseKey:
        """
        Persist a mutated license key with a version check.

        Args:
            license_key: Mutated LicenseKey aggregate

        Returns:
            Stored license key with its version incremented

        Raises:
            ConcurrentUpdateError: If the stored version moved on
            LicenseNotFoundError: If the key no longer exists
        """
        updated = LicenseKeyModel.objects.filter(
            id=license_key.id, version=license_key.version
        ).update(version=F("version") + 1, **self._to_fields(license_key))
        if updated == 0:
            if LicenseKeyModel.objects.filter(id=license_key.id).exists():
                raise ConcurrentUpdateError()
            raise LicenseNotFoundError()
        return replace(license_key, version=license_key.version + 1)

    @sync_to_async
    def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        try:
            return self._to_domain(LicenseKeyModel.objects.get(id=license_key_id))
        except LicenseKeyModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_owner_and_product(
        self, owner_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        """
        Find the license key an owner holds for a product.

        Args:
            owner_id: Account UUID
            product_id: Product UUID

        Returns:
            LicenseKey entity or None if not found
        """
        try:
            return self._to_domain(
                LicenseKeyModel.objects.get(owner_id=owner_id, product_id=product_id)
            )
        except LicenseKeyModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[LicenseKey]:
        """
        List all license keys, newest first.

        Returns:
            List of LicenseKey entities
        """
        return [self._to_domain(model) for model in LicenseKeyModel.objects.all()]
