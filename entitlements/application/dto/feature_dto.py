"""
Feature entitlement DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class FeatureUsageDTO:
    """DTO for an accepted usage."""

    license_key_id: uuid.UUID
    feature_id: uuid.UUID
    outcome: str
    usage_count: Optional[int]
    limit: Optional[int]


@dataclass
class FeatureRestoreDTO:
    """DTO for a restored feature."""

    license_key_id: uuid.UUID
    feature_id: uuid.UUID
    limit: Optional[int]
    license_status: str
