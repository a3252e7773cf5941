"""Calendar navigation primitives over zone-local wall-clock time.

Every adjuster takes an instant and the zone in which business hours apply,
moves the instant on that zone's wall clock, and returns a UTC instant. The
absolute value of the input is never modified in place; zones are only used
to read hour-of-day and day-of-week.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo

from .calendar_policy import DEFAULT_CALENDAR_POLICY, CalendarPolicy

_ONE_DAY = timedelta(days=1)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InstantAdjuster:
    """Pure calendar adjusters built on a :class:`CalendarPolicy`.

    Results that land on a business-hours boundary are exact on the hour
    (minutes, seconds and microseconds are reset).
    """

    def __init__(self, policy: CalendarPolicy = DEFAULT_CALENDAR_POLICY) -> None:
        self._policy = policy

    @property
    def policy(self) -> CalendarPolicy:
        return self._policy

    # region: adjusters

    def start_of_day(self, instant: datetime, zone: tzinfo) -> datetime:
        """Reset to 00:00 local time on the same calendar date."""
        return to_utc(self._at_hour(self._local(instant, zone), 0))

    def next_working_day(self, instant: datetime, zone: tzinfo) -> datetime:
        """Keep the local time of day and move to the next working date.

        Example:
            - Friday 11 AM   --> Monday 11 AM
            - Saturday 11 AM --> Monday 11 AM
            - Monday 11 AM   --> Tuesday 11 AM
        """
        local = self._local(instant, zone) + _ONE_DAY
        while self._policy.is_weekend(local.weekday()):
            local += _ONE_DAY
        return to_utc(local)

    def next_working_day_or_same(self, instant: datetime, zone: tzinfo) -> datetime:
        """Return the instant itself on a working date, else roll forward to the next one."""
        local = self._local(instant, zone)
        if not self._policy.is_weekend(local.weekday()):
            return to_utc(instant)
        while self._policy.is_weekend(local.weekday()):
            local += _ONE_DAY
        return to_utc(local)

    def next_working_hour_or_same(self, instant: datetime, zone: tzinfo) -> datetime:
        """Move into the working-hour window, ignoring weekends.

        Example:
            - Monday 11 AM  --> Monday 11 AM (already in working hour)
            - Tuesday 6 AM  --> Tuesday 9 AM
            - Tuesday 8 PM  --> Wednesday 9 AM
            - Friday 8 PM   --> Saturday 9 AM (weekends are handled by callers)
        """
        local = self._local(instant, zone)
        if local.hour < self._policy.work_start_hour:
            return to_utc(self._at_hour(local, self._policy.work_start_hour))
        if local.hour >= self._policy.work_end_hour:
            return to_utc(self._at_hour(local + _ONE_DAY, self._policy.work_start_hour))
        return to_utc(instant)

    def next_non_working_hour_or_same(self, instant: datetime, zone: tzinfo) -> datetime:
        """Return the instant if already past closing, else closing time the same day."""
        local = self._local(instant, zone)
        if local.hour >= self._policy.work_end_hour:
            return to_utc(instant)
        return to_utc(self._at_hour(local, self._policy.work_end_hour))

    def prev_working_hour(self, instant: datetime, zone: tzinfo) -> datetime:
        """Back up to the previous working-hour boundary, ignoring weekends.

        Example:
            - Monday 11 AM  --> Monday 9 AM
            - Tuesday 8 PM  --> Tuesday 5 PM
            - Tuesday 6 AM  --> Monday 5 PM
        """
        local = self._local(instant, zone)
        if local.hour < self._policy.work_start_hour:
            return to_utc(self._at_hour(local - _ONE_DAY, self._policy.work_end_hour))
        if local.hour > self._policy.work_end_hour:
            return to_utc(self._at_hour(local, self._policy.work_end_hour))
        return to_utc(self._at_hour(local, self._policy.work_start_hour))

    def opening_time(self, instant: datetime, zone: tzinfo) -> datetime:
        """Start of the working-hour window on the instant's local date."""
        return to_utc(self._at_hour(self._local(instant, zone), self._policy.work_start_hour))

    def closing_time(self, instant: datetime, zone: tzinfo) -> datetime:
        """End of the working-hour window on the instant's local date."""
        return to_utc(self._at_hour(self._local(instant, zone), self._policy.work_end_hour))

    # endregion

    # region: predicates

    def is_on_working_day(self, instant: datetime, zone: tzinfo) -> bool:
        return self.next_working_day_or_same(instant, zone) == to_utc(instant)

    def is_within_working_hour(self, instant: datetime, zone: tzinfo) -> bool:
        return self.next_working_hour_or_same(instant, zone) == to_utc(instant)

    def is_before_working_hour(self, instant: datetime, zone: tzinfo) -> bool:
        return self._local(instant, zone).hour < self._policy.work_start_hour

    def is_after_working_hour(self, instant: datetime, zone: tzinfo) -> bool:
        return self._local(instant, zone).hour >= self._policy.work_end_hour

    def is_same_day(self, first: datetime, second: datetime, zone: tzinfo) -> bool:
        return self._local(first, zone).date() == self._local(second, zone).date()

    def is_next_day(self, first: datetime, second: datetime, zone: tzinfo) -> bool:
        """True when ``second`` falls on the calendar date right after ``first``."""
        return self._local(second, zone).date() == self._local(first, zone).date() + _ONE_DAY

    # endregion

    @staticmethod
    def _local(instant: datetime, zone: tzinfo) -> datetime:
        return to_utc(instant).astimezone(zone)

    @staticmethod
    def _at_hour(local: datetime, hour: int) -> datetime:
        return local.replace(hour=hour, minute=0, second=0, microsecond=0)
