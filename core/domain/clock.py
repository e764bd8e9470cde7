"""
Clock port and calendar helpers.

Domain services never read the wall clock directly; they receive a Clock
so that expiry and daily quota windows can be tested deterministically.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        pass


class SystemClock(Clock):
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock that returns a settable instant."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        """
        Move the clock forward.

        Args:
            **kwargs: timedelta arguments (days, hours, minutes...)

        Returns:
            The new current time
        """
        self.current = self.current + timedelta(**kwargs)
        return self.current


def add_years(moment: datetime, years: int) -> datetime:
    """
    Add calendar years to a datetime.

    February 29th maps to February 28th in non-leap target years.

    Args:
        moment: Starting datetime
        years: Number of years to add

    Returns:
        Shifted datetime
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def calendar_day(moment: datetime) -> date:
    """Return the UTC calendar day of an instant."""
    return moment.astimezone(timezone.utc).date()
