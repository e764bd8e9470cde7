"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum

from core.domain.exceptions import DomainValidationError


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


def _describe(enum_cls) -> str:
    """Return 'package tier' for PackageTier."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", enum_cls.__name__).lower()


class ChoiceEnum(Enum):
    """Enum parsed from request values."""

    @classmethod
    def parse(cls, value) -> "ChoiceEnum":
        """
        Coerce a raw value into a member.

        Args:
            value: Member or member value

        Returns:
            Enum member

        Raises:
            DomainValidationError: If the value is not a member
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise DomainValidationError(
                f"Invalid {_describe(cls)}: {value!r} (expected one of {choices})"
            ) from None

    def __str__(self) -> str:
        """Return member value as string."""
        return self.value


class PackageTier(ChoiceEnum):
    """Package tier a license and catalog features belong to."""

    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class LicenseMode(ChoiceEnum):
    """License mode value object."""

    PERPETUAL = "perpetual"
    ANNUAL = "annual"


class LicenseStatus(ChoiceEnum):
    """License status value object."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class GrantStatus(ChoiceEnum):
    """Feature grant status value object."""

    ACTIVE = "active"
    DISABLED = "disabled"


@dataclass(frozen=True)
class Username(ValueObject):
    """Username value object."""

    value: str

    def __post_init__(self):
        """Validate username."""
        if not self.value or not self.value.strip():
            raise DomainValidationError("Username is required")
        if len(self.value) > 150:
            raise DomainValidationError("Username too long")

    def __str__(self) -> str:
        """Return username as string."""
        return self.value
