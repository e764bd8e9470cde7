"""
Wiring of ports, domain services and handlers for the v1 API.

Repositories are stateless and shared; handlers are built per request
so that configuration and the clock are read at call time.
"""
from accounts.infrastructure.repositories.django_account_directory import DjangoAccountDirectory
from catalog.infrastructure.repositories.django_product_catalog import DjangoProductCatalog
from core.domain.clock import SystemClock
from core.infrastructure.config import key_generator_config, ledger_config, max_generation_attempts
from entitlements.application.handlers.record_feature_usage_handler import RecordFeatureUsageHandler
from entitlements.application.handlers.restore_feature_handler import RestoreFeatureHandler
from entitlements.application.services.entitlement_evaluator import EntitlementEvaluator
from entitlements.domain.ledger import FeatureEntitlementLedger
from licenses.application.handlers.activate_license_handler import ActivateLicenseHandler
from licenses.application.handlers.check_license_handler import CheckLicenseHandler
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.application.handlers.upgrade_license_handler import UpgradeLicenseHandler
from licenses.domain.key_generator import LicenseKeyGenerator
from licenses.domain.registry import LicenseRegistry
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)

# Initialize repositories (in production, use DI container)
clock = SystemClock()
account_directory = DjangoAccountDirectory()
product_catalog = DjangoProductCatalog()
license_key_repository = DjangoLicenseKeyRepository()


def license_registry() -> LicenseRegistry:
    """Build the registry from current settings."""
    return LicenseRegistry(LicenseKeyGenerator(key_generator_config()), clock)


def entitlement_evaluator() -> EntitlementEvaluator:
    """Build the evaluator from current settings."""
    return EntitlementEvaluator(FeatureEntitlementLedger(ledger_config()), clock)


def issue_license_handler() -> IssueLicenseHandler:
    return IssueLicenseHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        registry=license_registry(),
        max_generation_attempts=max_generation_attempts(),
    )


def activate_license_handler() -> ActivateLicenseHandler:
    return ActivateLicenseHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        registry=license_registry(),
    )


def upgrade_license_handler() -> UpgradeLicenseHandler:
    return UpgradeLicenseHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        registry=license_registry(),
    )


def check_license_handler() -> CheckLicenseHandler:
    return CheckLicenseHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        registry=license_registry(),
    )


def list_licenses_handler() -> ListLicensesHandler:
    return ListLicensesHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        registry=license_registry(),
    )


def record_feature_usage_handler() -> RecordFeatureUsageHandler:
    return RecordFeatureUsageHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        evaluator=entitlement_evaluator(),
    )


def restore_feature_handler() -> RestoreFeatureHandler:
    return RestoreFeatureHandler(
        account_directory=account_directory,
        product_catalog=product_catalog,
        license_key_repository=license_key_repository,
        evaluator=entitlement_evaluator(),
    )
