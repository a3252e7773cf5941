"""Reviewer to time zone lookup used for per-reviewer working hours."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Union
from zoneinfo import ZoneInfo

from .config import DEFAULT_TIMEZONE, Config, validate_timezone
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ZoneLike = Union[str, ZoneInfo]

# Convenience lookup for some known locations.
CITY_ZONES: Mapping[str, str] = {
    "Atlanta": "America/New_York",
    "Chicago": "America/Chicago",
    "Detroit": "America/Detroit",
    "New York": "America/New_York",
    "Phoenix": "America/Phoenix",
    "San Francisco": "America/Los_Angeles",
    "Toronto": "America/Toronto",
    "Vancouver": "America/Vancouver",
}


def city_zone(city: str) -> ZoneInfo:
    """Return the time zone for a city listed in :data:`CITY_ZONES`.

    Raises:
        ConfigurationError: If the city is not listed.
    """
    zone_name = CITY_ZONES.get(city)
    if zone_name is None:
        raise ConfigurationError(f"Unknown city '{city}'. Add it to CITY_ZONES first.")
    return ZoneInfo(zone_name)


def _as_zone(value: ZoneLike) -> ZoneInfo:
    if isinstance(value, ZoneInfo):
        return value
    return validate_timezone(value)


class ReviewerTimezoneResolver:
    """Maps a reviewer login to the zone whose business hours apply to them.

    Instances are callable, so they can be passed wherever a
    ``Callable[[str], tzinfo]`` is expected. Reviewers without an explicit
    mapping get the default zone.
    """

    def __init__(
        self,
        zones: Optional[Mapping[str, ZoneLike]] = None,
        default_zone: ZoneLike = DEFAULT_TIMEZONE,
    ) -> None:
        self._default_zone = _as_zone(default_zone)
        self._zones: Dict[str, ZoneInfo] = {
            login: _as_zone(zone) for login, zone in (zones or {}).items()
        }

    @classmethod
    def from_config(cls, config: Config) -> "ReviewerTimezoneResolver":
        return cls(zones=config.reviewer_timezones, default_zone=config.default_timezone)

    @property
    def default_zone(self) -> ZoneInfo:
        return self._default_zone

    def timezone_of(self, login: str) -> ZoneInfo:
        zone = self._zones.get(login)
        if zone is None:
            logger.debug(
                "Using default time zone for reviewer",
                extra={"reviewer": login, "zone": str(self._default_zone)},
            )
            return self._default_zone

        logger.debug(
            "Using reviewer specific time zone",
            extra={"reviewer": login, "zone": str(zone)},
        )
        return zone

    __call__ = timezone_of
