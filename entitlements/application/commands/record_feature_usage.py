"""
RecordFeatureUsageCommand.

Command to count one use of a feature by an owner.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import Username


@dataclass
class RecordFeatureUsageCommand:
    """Command to record a feature usage."""

    username: str
    feature_id: uuid.UUID

    def __post_init__(self):
        """Validate username."""
        self.username = str(Username(self.username))
