"""Business-hours and weekend rules used for working time calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import FrozenSet

from .errors import ConfigurationError

SATURDAY = 5
SUNDAY = 6


@dataclass(frozen=True)
class CalendarPolicy:
    """Working hours window and weekend days, in zone-local wall-clock terms.

    Weekdays use :meth:`datetime.date.weekday` numbering (Monday is ``0``).
    """

    work_start_hour: int = 9
    work_end_hour: int = 17
    weekend_days: FrozenSet[int] = frozenset({SATURDAY, SUNDAY})

    def __post_init__(self) -> None:
        if not 0 <= self.work_start_hour < self.work_end_hour <= 23:
            raise ConfigurationError(
                "Invalid working hours: expected 0 <= start < end <= 23, "
                f"got {self.work_start_hour} to {self.work_end_hour}."
            )
        if not set(self.weekend_days) < set(range(7)):
            raise ConfigurationError(
                "Invalid weekend days: expected weekday numbers 0-6 leaving at least one working day."
            )

    def is_weekend(self, weekday: int) -> bool:
        return weekday in self.weekend_days

    @property
    def working_day_length(self) -> timedelta:
        """Length of one full working day (8 hours under the default policy)."""
        return timedelta(hours=self.work_end_hour - self.work_start_hour)


DEFAULT_CALENDAR_POLICY = CalendarPolicy()
