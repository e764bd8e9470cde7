"""
RestoreFeatureCommand.

Command to restore a feature disabled after repeated violations.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import Username


@dataclass
class RestoreFeatureCommand:
    """Command to restore a disabled feature."""

    username: str
    feature_id: uuid.UUID

    def __post_init__(self):
        """Validate username."""
        self.username = str(Username(self.username))
