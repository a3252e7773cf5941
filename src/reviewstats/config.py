"""Configuration parsing and validation for PR review stats."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError

DEFAULT_TIMEZONE = "America/New_York"

DEFAULT_TIMEZONE_ENV = "REVIEW_STATS_DEFAULT_TIMEZONE"
REVIEWER_TIMEZONES_ENV = "REVIEW_STATS_REVIEWER_TIMEZONES"


@dataclass(frozen=True)
class Config:
    """Validated time zone settings used for working hours calculations."""

    default_timezone: str = DEFAULT_TIMEZONE
    reviewer_timezones: Mapping[str, str] = field(default_factory=dict)


def validate_timezone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone name.

    Raises:
        ConfigurationError: If ``name`` is empty or not a known IANA zone.
    """
    if not name or not name.strip():
        raise ConfigurationError("Invalid time zone: expected a non-empty IANA zone name.")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown time zone '{name}'.") from exc


def parse_reviewer_timezones(value: str) -> Dict[str, str]:
    """Parse ``login=Zone/Name`` pairs separated by commas.

    Empty entries are ignored, so trailing commas are harmless.

    Raises:
        ConfigurationError: If an entry has no ``=`` or an empty login or zone.
    """
    zones: Dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        login, separator, zone = entry.partition("=")
        if not separator or not login.strip() or not zone.strip():
            raise ConfigurationError(
                f"Invalid reviewer time zone entry '{entry}': expected 'login=Zone/Name'."
            )
        zones[login.strip()] = zone.strip()
    return zones


def load_config(
    default_timezone: Optional[str] = None,
    reviewer_timezones: Optional[Mapping[str, str]] = None,
) -> Config:
    """Build and validate time zone configuration.

    Explicit arguments win over environment variables:

    - ``REVIEW_STATS_DEFAULT_TIMEZONE``: zone for reviewers without a mapping.
    - ``REVIEW_STATS_REVIEWER_TIMEZONES``: ``login=Zone/Name`` pairs, comma separated.

    Args:
        default_timezone: IANA zone used when a reviewer has no explicit mapping.
        reviewer_timezones: Reviewer login to IANA zone name.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any zone name is unknown or the environment
            value is malformed.
    """
    if default_timezone is None:
        default_timezone = os.getenv(DEFAULT_TIMEZONE_ENV, "").strip() or DEFAULT_TIMEZONE

    if reviewer_timezones is None:
        reviewer_timezones = parse_reviewer_timezones(os.getenv(REVIEWER_TIMEZONES_ENV, ""))

    return Config(
        default_timezone=validate_timezone(default_timezone).key,
        reviewer_timezones={
            login: validate_timezone(zone_name).key
            for login, zone_name in reviewer_timezones.items()
        },
    )
