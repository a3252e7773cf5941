"""Elapsed working time between two instants.

Working time is the part of an interval that falls inside the business-hours
window (09:00 to 17:00 local by default) on working days (Monday to Friday by
default), measured on the wall clock of a given time zone.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional

from .adjusters import InstantAdjuster, to_utc
from .errors import InvalidIntervalError

# Two non-working instants closer than this are inside the same weekend.
_WEEKEND_SPAN = timedelta(days=2)


class WorkingDurationCalculator:
    """Computes business-hours durations using an :class:`InstantAdjuster`."""

    def __init__(self, adjuster: Optional[InstantAdjuster] = None) -> None:
        self._adjuster = adjuster or InstantAdjuster()

    def diff_working_hours(self, start: datetime, end: datetime, zone: tzinfo) -> timedelta:
        """Return working time elapsed between ``start`` and ``end`` in ``zone``.

        Business logic:
        - Both instants on the same working day: overlap with that day's window.
        - Start on a working day, end on the following non-working day: only
          the start day contributes, up to its closing time.
        - Both instants on non-working days less than two days apart: zero.
        - Otherwise walk day by day, skipping non-working days, summing each
          working day's overlap, then add the partial last day.

        Args:
            start: Start instant. Naive values are treated as UTC.
            end: End instant. Naive values are treated as UTC.
            zone: Time zone whose wall clock defines business hours.

        Returns:
            A non-negative duration no longer than ``end - start``.

        Raises:
            InvalidIntervalError: If ``end`` is before ``start``.
        """
        start = to_utc(start)
        end = to_utc(end)
        if end < start:
            raise InvalidIntervalError(
                f"The end time {end.isoformat()} is before {start.isoformat()}."
            )

        adjuster = self._adjuster
        start_on_working_day = adjuster.is_on_working_day(start, zone)
        end_on_working_day = adjuster.is_on_working_day(end, zone)

        if adjuster.is_same_day(start, end, zone) and start_on_working_day and end_on_working_day:
            return self.working_duration(start, end, zone)

        if adjuster.is_next_day(start, end, zone) and start_on_working_day and not end_on_working_day:
            return self.working_duration(start, adjuster.closing_time(start, zone), zone)

        if not start_on_working_day and not end_on_working_day and end - start < _WEEKEND_SPAN:
            return timedelta(0)

        return self._diff_across_days(start, end, zone, end_on_working_day)

    def working_duration(self, start: datetime, end: datetime, zone: tzinfo) -> timedelta:
        """Overlap of ``[start, end]`` with one working day's business-hours window.

        Both instants must be on the same local date. ``start`` is clipped up
        to opening time and ``end`` down to closing time; spans entirely
        outside the window yield zero, spans covering it yield a full day.
        """
        clipped_start = max(start, self._adjuster.opening_time(start, zone))
        clipped_end = min(end, self._adjuster.closing_time(end, zone))
        return max(timedelta(0), clipped_end - clipped_start)

    def _diff_across_days(
        self,
        start: datetime,
        end: datetime,
        zone: tzinfo,
        end_on_working_day: bool,
    ) -> timedelta:
        adjuster = self._adjuster
        working_time = timedelta(0)

        cursor = adjuster.next_working_hour_or_same(start, zone)
        day_close = adjuster.next_non_working_hour_or_same(cursor, zone)

        while day_close < end and not adjuster.is_same_day(day_close, end, zone):
            if not adjuster.is_on_working_day(cursor, zone):
                cursor = adjuster.opening_time(adjuster.next_working_day(cursor, zone), zone)
                day_close = adjuster.next_non_working_hour_or_same(cursor, zone)
                continue

            working_time += self.working_duration(cursor, day_close, zone)

            cursor = adjuster.opening_time(adjuster.next_working_day(cursor, zone), zone)
            day_close = adjuster.next_non_working_hour_or_same(cursor, zone)

        if end_on_working_day:
            working_time += self.working_duration(adjuster.opening_time(end, zone), end, zone)

        return working_time


_DEFAULT_CALCULATOR = WorkingDurationCalculator()


def diff_working_hours(start: datetime, end: datetime, zone: tzinfo) -> timedelta:
    """Working time between two instants under the default calendar policy.

    See :meth:`WorkingDurationCalculator.diff_working_hours`.
    """
    return _DEFAULT_CALCULATOR.diff_working_hours(start, end, zone)
