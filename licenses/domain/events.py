"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseIssued(DomainEvent):
    """Event raised when a license key is issued."""

    owner_id: uuid.UUID
    product_id: uuid.UUID
    package_tier: str
    license_mode: str


@dataclass(frozen=True, kw_only=True)
class LicenseActivated(DomainEvent):
    """Event raised when a license key is activated."""

    owner_id: uuid.UUID
    license_mode: str
    expires_at: Optional[datetime]


@dataclass(frozen=True, kw_only=True)
class LicenseUpgraded(DomainEvent):
    """Event raised when a license key is upgraded."""

    previous_status: str
    status: str
    package_tier: str
    license_mode: str
    expires_at: Optional[datetime]


@dataclass(frozen=True, kw_only=True)
class LicenseExpired(DomainEvent):
    """Event raised when a read observes that an annual key has expired."""

    expires_at: Optional[datetime]
