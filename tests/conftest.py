"""
Pytest configuration and shared fixtures.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from accounts.domain.account import Account
from accounts.ports.account_directory import AccountDirectory
from catalog.domain.product import Feature, Product
from catalog.ports.product_catalog import ProductCatalog
from core.domain.clock import FixedClock
from core.domain.events import DomainEvent, EventBus
from core.domain.exceptions import (
    ConcurrentUpdateError,
    DuplicateLicenseError,
    DuplicateLicenseSecretError,
    LicenseNotFoundError,
)
from core.domain.value_objects import PackageTier, Username
from entitlements.application.services.entitlement_evaluator import EntitlementEvaluator
from entitlements.domain.ledger import FeatureEntitlementLedger
from licenses.domain.key_generator import KeyGeneratorConfig, LicenseKeyGenerator
from licenses.domain.license_key import LicenseKey
from licenses.domain.registry import LicenseRegistry
from licenses.ports.license_key_repository import LicenseKeyRepository

START = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class InMemoryAccountDirectory(AccountDirectory):
    """Account directory backed by a dict."""

    def __init__(self):
        self.accounts: Dict[uuid.UUID, Account] = {}

    def add(self, username: str) -> Account:
        account = Account(id=uuid.uuid4(), username=Username(username))
        self.accounts[account.id] = account
        return account

    def record_secret(self, account_id: uuid.UUID, product_id: uuid.UUID, raw_secret: str) -> None:
        account = self.accounts[account_id]
        secrets = dict(account.license_secrets)
        secrets[product_id] = raw_secret
        self.accounts[account_id] = replace(account, license_secrets=secrets)

    def secret_in_use(self, raw_secret: str) -> bool:
        return any(
            raw_secret in account.license_secrets.values() for account in self.accounts.values()
        )

    async def find_by_username(self, username: str) -> Optional[Account]:
        for account in self.accounts.values():
            if str(account.username) == username:
                return account
        return None

    async def find_by_id(self, account_id: uuid.UUID) -> Optional[Account]:
        return self.accounts.get(account_id)


class InMemoryProductCatalog(ProductCatalog):
    """Product catalog backed by dicts."""

    def __init__(self):
        self.products: Dict[uuid.UUID, Product] = {}
        self.features: Dict[uuid.UUID, Feature] = {}

    def add_product(self, name: str) -> Product:
        product = Product(id=uuid.uuid4(), name=name, description="", created_at=START)
        self.products[product.id] = product
        return product

    def add_feature(self, product: Product, name: str, package_tier: PackageTier) -> Feature:
        feature = Feature(
            id=uuid.uuid4(), product_id=product.id, name=name, package_tier=package_tier
        )
        self.features[feature.id] = feature
        return feature

    async def find_product(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.products.get(product_id)

    async def find_product_by_name(self, name: str) -> Optional[Product]:
        for product in self.products.values():
            if product.name == name:
                return product
        return None

    async def find_feature(self, feature_id: uuid.UUID) -> Optional[Feature]:
        return self.features.get(feature_id)

    async def list_tier_features(self, product_id: uuid.UUID, package_tier) -> List[Feature]:
        package_tier = PackageTier.parse(package_tier)
        return [
            feature
            for feature in self.features.values()
            if feature.product_id == product_id and feature.belongs_to(package_tier)
        ]


class InMemoryLicenseKeyRepository(LicenseKeyRepository):
    """
    License key repository backed by a dict.

    Mirrors the versioned save of the ORM adapter and records issued
    secrets on the account directory.
    """

    def __init__(self, account_directory: InMemoryAccountDirectory):
        self.account_directory = account_directory
        self.keys: Dict[uuid.UUID, LicenseKey] = {}
        self.forced_secret_collisions = 0

    async def add(self, license_key: LicenseKey, raw_secret: str) -> LicenseKey:
        if self.forced_secret_collisions > 0:
            self.forced_secret_collisions -= 1
            raise DuplicateLicenseSecretError()
        if self.account_directory.secret_in_use(raw_secret):
            raise DuplicateLicenseSecretError()
        for stored in self.keys.values():
            if (stored.owner_id, stored.product_id) == (license_key.owner_id, license_key.product_id):
                raise DuplicateLicenseError()
        stored = replace(license_key, version=0)
        self.keys[stored.id] = stored
        self.account_directory.record_secret(license_key.owner_id, license_key.product_id, raw_secret)
        return stored

    async def save(self, license_key: LicenseKey) -> LicenseKey:
        stored = self.keys.get(license_key.id)
        if stored is None:
            raise LicenseNotFoundError()
        if stored.version != license_key.version:
            raise ConcurrentUpdateError()
        saved = replace(license_key, version=license_key.version + 1)
        self.keys[saved.id] = saved
        return saved

    async def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        return self.keys.get(license_key_id)

    async def find_by_owner_and_product(
        self, owner_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        for stored in self.keys.values():
            if stored.owner_id == owner_id and stored.product_id == product_id:
                return stored
        return None

    async def list_all(self) -> List[LicenseKey]:
        return sorted(self.keys.values(), key=lambda key: key.created_at, reverse=True)


class RecordingEventBus(EventBus):
    """Event bus that keeps published events for assertions."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def subscribe(self, event_type, handler) -> None:
        pass

    def of_type(self, event_type) -> List[DomainEvent]:
        return [event for event in self.events if isinstance(event, event_type)]


@pytest.fixture
def clock():
    """Fixture for a FixedClock at a known instant."""
    return FixedClock(START)


@pytest.fixture
def key_generator():
    """Fixture for a fast key generator."""
    return LicenseKeyGenerator(KeyGeneratorConfig(hash_rounds=4))


@pytest.fixture
def registry(key_generator, clock):
    """Fixture for LicenseRegistry."""
    return LicenseRegistry(key_generator, clock)


@pytest.fixture
def ledger():
    """Fixture for FeatureEntitlementLedger with the default window."""
    return FeatureEntitlementLedger()


@pytest.fixture
def evaluator(ledger, clock):
    """Fixture for EntitlementEvaluator."""
    return EntitlementEvaluator(ledger, clock)


@pytest.fixture
def account_directory():
    """Fixture for an in-memory AccountDirectory."""
    return InMemoryAccountDirectory()


@pytest.fixture
def product_catalog():
    """Fixture for an in-memory ProductCatalog."""
    return InMemoryProductCatalog()


@pytest.fixture
def memory_license_key_repository(account_directory):
    """Fixture for an in-memory LicenseKeyRepository."""
    return InMemoryLicenseKeyRepository(account_directory)


@pytest.fixture
def recording_event_bus():
    """Fixture for an event bus that records published events."""
    return RecordingEventBus()


@pytest.fixture
def catalog_data(account_directory, product_catalog):
    """Fixture for an account and a product with basic and premium features."""
    account = account_directory.add("alice")
    product = product_catalog.add_product("Photo Studio")
    export = product_catalog.add_feature(product, "Export", PackageTier.BASIC)
    share = product_catalog.add_feature(product, "Share", PackageTier.BASIC)
    batch = product_catalog.add_feature(product, "Batch Edit", PackageTier.PREMIUM)
    return SimpleNamespace(
        account=account, product=product, export=export, share=share, batch=batch
    )


@pytest.fixture
def license_key_repository():
    """Fixture for the Django LicenseKeyRepository."""
    from licenses.infrastructure.repositories.django_license_key_repository import (
        DjangoLicenseKeyRepository,
    )

    return DjangoLicenseKeyRepository()


@pytest.fixture
def db_catalog(db):
    """Fixture for an account and a product with features saved in the database."""
    from accounts.infrastructure.models import Account as AccountModel
    from catalog.infrastructure.models import Feature as FeatureModel
    from catalog.infrastructure.models import Product as ProductModel

    account = AccountModel.objects.create(username="alice")
    product = ProductModel.objects.create(name="Photo Studio")
    export = FeatureModel.objects.create(product=product, name="Export", package_tier="basic")
    share = FeatureModel.objects.create(product=product, name="Share", package_tier="basic")
    batch = FeatureModel.objects.create(product=product, name="Batch Edit", package_tier="premium")
    return SimpleNamespace(
        account=account, product=product, export=export, share=share, batch=batch
    )


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
