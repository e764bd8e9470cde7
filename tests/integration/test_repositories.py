"""
Integration tests for repository implementations.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from asgiref.sync import async_to_sync

from accounts.infrastructure.models import ProductLicense
from accounts.infrastructure.repositories.django_account_directory import DjangoAccountDirectory
from catalog.infrastructure.repositories.django_product_catalog import DjangoProductCatalog
from core.domain.exceptions import (
    ConcurrentUpdateError,
    DuplicateLicenseError,
    DuplicateLicenseSecretError,
    LicenseNotFoundError,
)
from core.domain.value_objects import GrantStatus, LicenseMode, LicenseStatus, PackageTier
from licenses.domain.license_key import FeatureGrant, LicenseKey

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def new_key(db_catalog, grants=None, product_id=None):
    return LicenseKey.create(
        verification_hash="$2b$04$hash",
        owner_id=db_catalog.account.id,
        product_id=product_id or db_catalog.product.id,
        package_tier=PackageTier.BASIC,
        license_mode=LicenseMode.PERPETUAL,
        issued_duration=1,
        grants=grants or [],
        now=NOW,
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseKeyRepository:
    """Integration tests for DjangoLicenseKeyRepository."""

    def test_add_and_find(self, license_key_repository, db_catalog):
        """Test adding a key and loading it back with its grants."""
        grant = FeatureGrant(
            feature_id=db_catalog.export.id,
            limit=3,
            usage_count=2,
            first_used_at=NOW,
            last_used_at=NOW,
            last_violation_at=NOW,
            consecutive_violations=1,
            status=GrantStatus.DISABLED,
        )
        key = new_key(db_catalog, [grant, FeatureGrant.fresh(db_catalog.share.id)])

        async_to_sync(license_key_repository.add)(key, "AAAA-BBBB-CCCC-DDDD")
        found = async_to_sync(license_key_repository.find_by_id)(key.id)

        assert found.status == LicenseStatus.INACTIVE
        assert found.version == 0
        assert list(found.allowed_features) == [db_catalog.export.id, db_catalog.share.id]
        assert found.find_grant(db_catalog.export.id) == grant
        assert ProductLicense.objects.get(account=db_catalog.account).license_secret == (
            "AAAA-BBBB-CCCC-DDDD"
        )

    def test_find_by_owner_and_product(self, license_key_repository, db_catalog):
        """Test looking a key up by owner and product."""
        key = new_key(db_catalog)
        async_to_sync(license_key_repository.add)(key, "AAAA-BBBB-CCCC-DDDD")

        found = async_to_sync(license_key_repository.find_by_owner_and_product)(
            db_catalog.account.id, db_catalog.product.id
        )
        assert found.id == key.id
        assert (
            async_to_sync(license_key_repository.find_by_owner_and_product)(
                db_catalog.account.id, uuid.uuid4()
            )
            is None
        )

    def test_find_not_found(self, license_key_repository, db):
        """Test finding a non-existent key."""
        assert async_to_sync(license_key_repository.find_by_id)(uuid.uuid4()) is None

    def test_duplicate_owner_and_product(self, license_key_repository, db_catalog):
        """Test a second key for the same owner and product is rejected."""
        async_to_sync(license_key_repository.add)(new_key(db_catalog), "AAAA-BBBB-CCCC-DDDD")
        with pytest.raises(DuplicateLicenseError):
            async_to_sync(license_key_repository.add)(new_key(db_catalog), "EEEE-FFFF-GGGG-HHHH")

    def test_duplicate_secret(self, license_key_repository, db_catalog):
        """Test a colliding raw secret is reported separately."""
        from catalog.infrastructure.models import Product as ProductModel

        other = ProductModel.objects.create(name="Video Studio")
        async_to_sync(license_key_repository.add)(new_key(db_catalog), "AAAA-BBBB-CCCC-DDDD")
        with pytest.raises(DuplicateLicenseSecretError):
            async_to_sync(license_key_repository.add)(
                new_key(db_catalog, product_id=other.id), "AAAA-BBBB-CCCC-DDDD"
            )

    def test_save_increments_version(self, license_key_repository, db_catalog):
        """Test saving persists changes and bumps the version."""
        key = async_to_sync(license_key_repository.add)(new_key(db_catalog), "AAAA-BBBB-CCCC-DDDD")
        active = replace(key, status=LicenseStatus.ACTIVE, activated_at=NOW)

        saved = async_to_sync(license_key_repository.save)(active)
        found = async_to_sync(license_key_repository.find_by_id)(key.id)

        assert saved.version == 1
        assert found.version == 1
        assert found.status == LicenseStatus.ACTIVE
        assert found.activated_at == NOW

    def test_save_stale_version(self, license_key_repository, db_catalog):
        """Test a save based on a stale read is rejected."""
        key = async_to_sync(license_key_repository.add)(new_key(db_catalog), "AAAA-BBBB-CCCC-DDDD")
        async_to_sync(license_key_repository.save)(replace(key, issued_duration=2))

        with pytest.raises(ConcurrentUpdateError):
            async_to_sync(license_key_repository.save)(replace(key, issued_duration=3))

    def test_save_missing_key(self, license_key_repository, db_catalog):
        """Test saving a key that was never added."""
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_key_repository.save)(new_key(db_catalog))

    def test_disabled_features_round_trip(self, license_key_repository, db_catalog):
        """Test disabled records keep their limit."""
        key = async_to_sync(license_key_repository.add)(
            new_key(db_catalog, [FeatureGrant.fresh(db_catalog.export.id, 4)]),
            "AAAA-BBBB-CCCC-DDDD",
        )
        async_to_sync(license_key_repository.save)(key.suspend_feature(db_catalog.export.id, NOW))

        found = async_to_sync(license_key_repository.find_by_id)(key.id)
        assert found.allowed_features == {}
        assert found.find_disabled(db_catalog.export.id).limit == 4

    def test_list_all(self, license_key_repository, db_catalog):
        """Test listing every key."""
        async_to_sync(license_key_repository.add)(new_key(db_catalog), "AAAA-BBBB-CCCC-DDDD")
        assert len(async_to_sync(license_key_repository.list_all)()) == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestCatalogAndAccounts:
    """Integration tests for the catalog and account adapters."""

    def test_list_tier_features(self, db_catalog):
        """Test tier features are filtered by product and tier."""
        catalog = DjangoProductCatalog()
        basic = async_to_sync(catalog.list_tier_features)(db_catalog.product.id, PackageTier.BASIC)
        premium = async_to_sync(catalog.list_tier_features)(db_catalog.product.id, "premium")

        assert {feature.id for feature in basic} == {db_catalog.export.id, db_catalog.share.id}
        assert [feature.id for feature in premium] == [db_catalog.batch.id]

    def test_find_product_and_feature(self, db_catalog):
        """Test product and feature lookups."""
        catalog = DjangoProductCatalog()
        product = async_to_sync(catalog.find_product_by_name)("Photo Studio")
        feature = async_to_sync(catalog.find_feature)(db_catalog.batch.id)

        assert product.id == db_catalog.product.id
        assert feature.package_tier == PackageTier.PREMIUM
        assert async_to_sync(catalog.find_product)(uuid.uuid4()) is None

    def test_account_with_license_secrets(self, db_catalog):
        """Test accounts carry the secrets of their product licenses."""
        ProductLicense.objects.create(
            account=db_catalog.account, product=db_catalog.product, license_secret="AAAA-BBBB-CCCC-DDDD"
        )
        directory = DjangoAccountDirectory()

        account = async_to_sync(directory.find_by_username)("alice")
        assert account.license_secret_for(db_catalog.product.id) == "AAAA-BBBB-CCCC-DDDD"
        assert async_to_sync(directory.find_by_id)(uuid.uuid4()) is None
