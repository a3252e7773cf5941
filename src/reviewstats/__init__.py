"""Working-hours review timings for GitHub pull requests."""

from .analyzer import PrReviewTimelineAnalyzer, analyze
from .errors import ConfigurationError, DataValidationError, InvalidIntervalError, ReviewStatsError
from .timezones import ReviewerTimezoneResolver
from .working_hours import WorkingDurationCalculator, diff_working_hours

__all__ = [
    "ConfigurationError",
    "DataValidationError",
    "InvalidIntervalError",
    "PrReviewTimelineAnalyzer",
    "ReviewStatsError",
    "ReviewerTimezoneResolver",
    "WorkingDurationCalculator",
    "analyze",
    "diff_working_hours",
]
