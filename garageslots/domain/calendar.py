"""
Business-hours calendar.

Converts between absolute instants and local wall-clock time for an IANA
timezone. All conversions go through pendulum's timezone database, so DST
transitions are handled without manual offset arithmetic.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

import pendulum
from pendulum import DateTime

from .exceptions import ConfigurationError, InvalidDateError, InvalidIntervalError

CLOCK_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60

InstantLike = Union[DateTime, datetime, str]
DateLike = Union[str, date]


@dataclass(frozen=True)
class DayBounds:
    """Absolute open and close instants of one business day."""
    open_instant: DateTime
    close_instant: DateTime


def ensure_timezone(timezone: str | None) -> str:
    """
    Validate an IANA timezone name.

    Raises:
        ConfigurationError: If the timezone is missing or unknown
    """
    if not timezone or not isinstance(timezone, str):
        raise ConfigurationError("Business timezone is not configured")

    try:
        pendulum.timezone(timezone)
    except (ValueError, KeyError) as exc:
        raise ConfigurationError(f"Unknown timezone: '{timezone}'") from exc

    return timezone


def parse_clock_time(value: str) -> int:
    """
    Parse a local ``HH:mm`` time into minutes since midnight.

    Raises:
        ConfigurationError: If the value is not a valid ``HH:mm`` string
    """
    match = CLOCK_TIME_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise ConfigurationError(f"Invalid time of day '{value}', expected HH:mm")

    return int(match.group(1)) * 60 + int(match.group(2))


def parse_date(value: DateLike) -> date:
    """
    Parse a ``YYYY-MM-DD`` calendar date.

    ``date`` objects are accepted as-is (datetimes are reduced to their date).

    Raises:
        InvalidDateError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD")

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def to_instant(value: InstantLike) -> DateTime:
    """
    Normalize a datetime-like value to a timezone-aware pendulum DateTime.

    Naive datetimes and ISO-8601 strings without an offset are read as UTC.

    Raises:
        InvalidIntervalError: If the value is not a usable instant
    """
    if isinstance(value, datetime):
        if isinstance(value, DateTime) and value.tzinfo is not None:
            return value
        return pendulum.instance(value)

    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value)
        except ValueError as exc:
            raise InvalidIntervalError(f"Invalid instant '{value}'") from exc
        if isinstance(parsed, DateTime):
            return parsed

    raise InvalidIntervalError(f"Invalid instant {value!r}")


def local_minutes(instant: InstantLike, timezone: str) -> int:
    """
    Project an absolute instant onto local minutes since midnight.

    Returns:
        Minutes in the range [0, 1440)
    """
    tz = ensure_timezone(timezone)
    local = to_instant(instant).in_timezone(tz)
    return local.hour * 60 + local.minute


def day_bounds(
    day: DateLike,
    timezone: str,
    open_time: str,
    close_time: str
) -> DayBounds:
    """
    Compute the absolute open and close instants of a local calendar date.

    Args:
        day: Calendar date (YYYY-MM-DD) interpreted in ``timezone``
        timezone: IANA timezone of the business
        open_time: Local opening time (HH:mm)
        close_time: Local closing time (HH:mm)

    Raises:
        ConfigurationError: For a bad timezone, bad times or an overnight window
        InvalidDateError: If the date cannot be parsed
    """
    tz = ensure_timezone(timezone)
    open_minutes = parse_clock_time(open_time)
    close_minutes = parse_clock_time(close_time)

    if open_minutes >= close_minutes:
        raise ConfigurationError(
            f"Opening time {open_time} must be before closing time {close_time}; "
            f"overnight business hours are not supported"
        )

    local_day = parse_date(day)
    open_instant = _local_instant(local_day, open_minutes, tz)
    close_instant = _local_instant(local_day, close_minutes, tz)

    # A DST jump can collapse a very short window
    if open_instant >= close_instant:
        raise ConfigurationError(
            f"Business hours {open_time}-{close_time} are empty on {local_day.isoformat()} in {tz}"
        )

    return DayBounds(open_instant=open_instant, close_instant=close_instant)


def _local_instant(day: date, minutes: int, timezone: str) -> DateTime:
    return pendulum.datetime(
        day.year,
        day.month,
        day.day,
        minutes // 60,
        minutes % 60,
        tz=timezone
    )
