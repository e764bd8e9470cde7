"""
Typed licensing configuration built from Django settings.

``settings.LICENSING`` holds the raw values; domain services only ever
receive the config objects built here.
"""
from datetime import timedelta

from django.conf import settings

from entitlements.domain.ledger import LedgerConfig
from licenses.domain.key_generator import KeyGeneratorConfig

DEFAULTS = {
    "KEY_HASH_ROUNDS": 12,
    "KEY_MAX_GENERATION_ATTEMPTS": 5,
    "ESCALATION_WINDOW_DAYS": 30,
}


def licensing_setting(name: str) -> int:
    """Read one licensing value, falling back to its default."""
    return int(getattr(settings, "LICENSING", {}).get(name, DEFAULTS[name]))


def key_generator_config() -> KeyGeneratorConfig:
    """Build the key generator configuration."""
    return KeyGeneratorConfig(hash_rounds=licensing_setting("KEY_HASH_ROUNDS"))


def ledger_config() -> LedgerConfig:
    """Build the entitlement ledger configuration."""
    return LedgerConfig(escalation_window=timedelta(days=licensing_setting("ESCALATION_WINDOW_DAYS")))


def max_generation_attempts() -> int:
    """Number of fresh secrets tried before issuance gives up on collisions."""
    return licensing_setting("KEY_MAX_GENERATION_ATTEMPTS")
