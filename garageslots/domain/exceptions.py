"""
Domain-specific exception hierarchy for the scheduling engine.

Each error carries a ``status_code`` hint so HTTP handlers can map it
without knowing the individual classes.
"""


class SchedulingError(Exception):
    """Base class for all scheduling errors."""

    status_code = 500


class ConfigurationError(SchedulingError):
    """Raised when the business-hours configuration is missing or invalid."""

    status_code = 500


class InvalidRequestError(SchedulingError, ValueError):
    """Raised when the caller supplied unusable input."""

    status_code = 400


class InvalidDateError(InvalidRequestError):
    """Raised when a calendar date cannot be parsed."""


class InvalidIntervalError(InvalidRequestError):
    """Raised for empty, inverted or incomplete time intervals."""


class OutsideBusinessHoursError(InvalidRequestError):
    """Raised when a requested booking window leaves the business day."""


class BookingNotAllowedError(SchedulingError):
    """Raised when customers may not book online."""

    status_code = 403


class BookingConflictError(SchedulingError):
    """Raised when a customer already holds an overlapping pre-booking."""

    status_code = 409
