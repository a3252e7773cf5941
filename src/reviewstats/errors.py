"""Custom exception types for PR review stats."""


class ReviewStatsError(Exception):
    """Base exception for all review stats errors."""


class ConfigurationError(ReviewStatsError):
    """Raised when runtime configuration values are missing or invalid."""


class InvalidIntervalError(ReviewStatsError, ValueError):
    """Raised when a duration is requested for an interval that ends before it starts."""


class DataValidationError(ReviewStatsError):
    """Raised when upstream payloads do not meet expected constraints."""
