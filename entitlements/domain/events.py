"""
Entitlement domain events.

Domain events represent something that happened to a feature grant.
"""

import uuid
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class FeatureViolationRecorded(DomainEvent):
    """Event raised when a usage attempt past the daily ceiling is recorded."""

    feature_id: uuid.UUID
    consecutive_violations: int


@dataclass(frozen=True, kw_only=True)
class FeatureSuspended(DomainEvent):
    """Event raised when a grant is moved to the disabled features."""

    feature_id: uuid.UUID
    license_status: str


@dataclass(frozen=True, kw_only=True)
class FeatureRestored(DomainEvent):
    """Event raised when a disabled feature is restored."""

    feature_id: uuid.UUID
    license_status: str
