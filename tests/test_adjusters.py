"""Tests for zone-aware calendar adjusters."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewstats.adjusters import InstantAdjuster, to_utc

TORONTO = ZoneInfo("America/Toronto")

# 2022-09-02 is a Friday, 2022-09-05 a Monday.
FRIDAY_11AM = datetime.fromisoformat("2022-09-02T11:00:00-04:00")
SATURDAY_11AM = datetime.fromisoformat("2022-09-03T11:00:00-04:00")
SUNDAY_11AM = datetime.fromisoformat("2022-09-04T11:00:00-04:00")
MONDAY_11AM = datetime.fromisoformat("2022-09-05T11:00:00-04:00")


def _at(value: str) -> datetime:
    return datetime.fromisoformat(value)


def test_to_utc_normalizes_aware_and_naive_values():
    """Verify aware values convert to UTC and naive values are taken as UTC."""
    assert to_utc(_at("2022-09-05T10:00:00-04:00")) == datetime(2022, 9, 5, 14, tzinfo=timezone.utc)
    assert to_utc(datetime(2022, 9, 5, 14)).tzinfo == timezone.utc


def test_adjusters_return_utc_instants():
    """Verify adjusted instants are expressed in UTC."""
    adjuster = InstantAdjuster()

    result = adjuster.next_working_day(FRIDAY_11AM, TORONTO)

    assert result.tzinfo == timezone.utc
    assert result == _at("2022-09-05T15:00:00+00:00")


def test_start_of_day_resets_local_time():
    """Verify start of day is local midnight on the same date."""
    adjuster = InstantAdjuster()

    assert adjuster.start_of_day(_at("2022-09-05T14:30:15-04:00"), TORONTO) == _at("2022-09-05T00:00:00-04:00")
    assert adjuster.start_of_day(_at("2022-09-06T01:30:00+00:00"), TORONTO) == _at("2022-09-05T00:00:00-04:00")


def test_next_working_day_skips_weekends():
    """Verify next working day keeps time of day and skips Saturday and Sunday."""
    adjuster = InstantAdjuster()

    assert adjuster.next_working_day(FRIDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day(SATURDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day(SUNDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day(MONDAY_11AM, TORONTO) == _at("2022-09-06T11:00:00-04:00")


def test_next_working_day_or_same_only_moves_weekends():
    """Verify weekdays map to themselves and weekend days roll to Monday."""
    adjuster = InstantAdjuster()

    assert adjuster.next_working_day_or_same(SATURDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day_or_same(SUNDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day_or_same(MONDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_day_or_same(FRIDAY_11AM, TORONTO) == FRIDAY_11AM


def test_next_working_hour_or_same():
    """Verify instants move into the 09:00-17:00 window, next calendar day after closing."""
    adjuster = InstantAdjuster()

    assert adjuster.next_working_hour_or_same(MONDAY_11AM, TORONTO) == MONDAY_11AM
    assert adjuster.next_working_hour_or_same(_at("2022-09-06T06:00:00-04:00"), TORONTO) == _at(
        "2022-09-06T09:00:00-04:00"
    )
    assert adjuster.next_working_hour_or_same(_at("2022-09-06T08:59:59-04:00"), TORONTO) == _at(
        "2022-09-06T09:00:00-04:00"
    )
    assert adjuster.next_working_hour_or_same(_at("2022-09-06T20:00:00-04:00"), TORONTO) == _at(
        "2022-09-07T09:00:00-04:00"
    )
    assert adjuster.next_working_hour_or_same(_at("2022-09-02T17:00:00-04:00"), TORONTO) == _at(
        "2022-09-03T09:00:00-04:00"
    )


def test_next_non_working_hour_or_same():
    """Verify instants before closing move to 17:00, later ones stay."""
    adjuster = InstantAdjuster()

    assert adjuster.next_non_working_hour_or_same(MONDAY_11AM, TORONTO) == _at("2022-09-05T17:00:00-04:00")
    assert adjuster.next_non_working_hour_or_same(_at("2022-09-05T06:10:00-04:00"), TORONTO) == _at(
        "2022-09-05T17:00:00-04:00"
    )
    evening = _at("2022-09-05T18:00:00-04:00")
    assert adjuster.next_non_working_hour_or_same(evening, TORONTO) == evening


def test_prev_working_hour():
    """Verify backing up to the previous business-hours boundary."""
    adjuster = InstantAdjuster()

    assert adjuster.prev_working_hour(MONDAY_11AM, TORONTO) == _at("2022-09-05T09:00:00-04:00")
    assert adjuster.prev_working_hour(_at("2022-09-06T20:00:00-04:00"), TORONTO) == _at(
        "2022-09-06T17:00:00-04:00"
    )
    assert adjuster.prev_working_hour(_at("2022-09-06T06:00:00-04:00"), TORONTO) == _at(
        "2022-09-05T17:00:00-04:00"
    )
    assert adjuster.prev_working_hour(_at("2022-09-06T17:30:00-04:00"), TORONTO) == _at(
        "2022-09-06T09:00:00-04:00"
    )


def test_predicates():
    """Verify working day and working hour predicates."""
    adjuster = InstantAdjuster()

    assert adjuster.is_on_working_day(MONDAY_11AM, TORONTO)
    assert not adjuster.is_on_working_day(SATURDAY_11AM, TORONTO)
    assert adjuster.is_within_working_hour(MONDAY_11AM, TORONTO)
    assert not adjuster.is_within_working_hour(_at("2022-09-05T17:54:25-04:00"), TORONTO)
    assert adjuster.is_before_working_hour(_at("2022-09-05T08:33:21-04:00"), TORONTO)
    assert not adjuster.is_before_working_hour(MONDAY_11AM, TORONTO)
    assert adjuster.is_after_working_hour(_at("2022-09-05T20:49:13-04:00"), TORONTO)
    assert not adjuster.is_after_working_hour(MONDAY_11AM, TORONTO)


def test_day_comparisons_use_local_dates():
    """Verify same-day and next-day checks are evaluated in the given zone."""
    adjuster = InstantAdjuster()
    late_monday_utc = _at("2022-09-06T01:00:00+00:00")  # Monday 21:00 in Toronto

    assert adjuster.is_same_day(MONDAY_11AM, late_monday_utc, TORONTO)
    assert not adjuster.is_same_day(MONDAY_11AM, late_monday_utc, timezone.utc)
    assert adjuster.is_next_day(FRIDAY_11AM, SATURDAY_11AM, TORONTO)
    assert not adjuster.is_next_day(FRIDAY_11AM, SUNDAY_11AM, TORONTO)
    assert not adjuster.is_next_day(SATURDAY_11AM, FRIDAY_11AM, TORONTO)


def test_or_same_adjusters_are_idempotent():
    """Verify applying the or-same adjusters twice equals applying them once."""
    adjuster = InstantAdjuster()
    instants = [
        FRIDAY_11AM,
        SATURDAY_11AM,
        SUNDAY_11AM,
        _at("2022-09-05T06:00:00-04:00"),
        _at("2022-09-05T17:00:00-04:00"),
        _at("2022-09-02T23:59:59-04:00"),
    ]

    for instant in instants:
        once = adjuster.next_working_day_or_same(instant, TORONTO)
        assert adjuster.next_working_day_or_same(once, TORONTO) == once

        once = adjuster.next_working_hour_or_same(instant, TORONTO)
        assert adjuster.next_working_hour_or_same(once, TORONTO) == once
