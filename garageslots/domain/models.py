"""
Domain models for intervals, slots, bookings and work assignments.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pendulum import DateTime

from .calendar import InstantLike, ensure_timezone, parse_clock_time, to_instant
from .exceptions import ConfigurationError, InvalidIntervalError
from .intervals import overlaps as intervals_overlap


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class BookingType(str, Enum):
    WALKIN = "WALKIN"
    PREBOOKING = "PREBOOKING"


class WorkOrderStatus(str, Enum):
    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING = "WAITING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


# Bookings in a terminal state free their slot
TERMINAL_BOOKING_STATUSES = frozenset({BookingStatus.DONE, BookingStatus.CANCELLED})

OCCUPYING_WORK_ORDER_STATUSES = frozenset({
    WorkOrderStatus.ASSIGNED,
    WorkOrderStatus.IN_PROGRESS,
    WorkOrderStatus.WAITING,
})


class CapacityMatch(str, Enum):
    """How a booking is matched against a slot when counting capacity."""
    OVERLAP = "overlap"
    EXACT = "exact"


@dataclass(frozen=True)
class TimeInterval:
    """
    Represents an immutable half-open interval ``[start, end)``.

    Bounds are stored in UTC; use ``local_bounds()`` for wall-clock times.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidIntervalError(
                f"Interval requires a start and an end instant, got {self.start!r} and {self.end!r}"
            )
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidIntervalError("Interval bounds must be timezone-aware instants")
        # Same-zone datetimes compare by wall clock and ignore fold
        object.__setattr__(self, "start", to_instant(self.start).in_timezone("UTC"))
        object.__setattr__(self, "end", to_instant(self.end).in_timezone("UTC"))
        if self.start >= self.end:
            raise InvalidIntervalError(f"Start time {self.start} must be before end time {self.end}")

    @classmethod
    def from_duration(cls, start: InstantLike, duration_minutes: int) -> "TimeInterval":
        """Build an interval from a start instant and a positive duration."""
        if not _is_int(duration_minutes):
            raise InvalidIntervalError(f"Duration must be a whole number of minutes, got {duration_minutes!r}")
        if duration_minutes <= 0:
            raise InvalidIntervalError(f"Duration must be positive, got {duration_minutes} minutes")
        start = to_instant(start)
        return cls(start=start, end=start.add(minutes=duration_minutes))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeInterval") -> bool:
        """Check if this interval overlaps with another."""
        return intervals_overlap(self, other)

    def contains(self, other: "TimeInterval") -> bool:
        """Check if another interval lies entirely within this one."""
        return self.start <= other.start and other.end <= self.end

    def local_bounds(self, timezone: str) -> Tuple[DateTime, DateTime]:
        """Return start and end as wall-clock times in ``timezone``."""
        return self.start.in_timezone(timezone), self.end.in_timezone(timezone)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BusinessHoursConfig:
    """
    Business-hours configuration injected into the resolvers.

    Nothing is checked at construction; ``validate()`` raises
    ``ConfigurationError`` so misconfiguration surfaces where the
    configuration is used.
    """
    timezone: Optional[str]
    open_time: str
    close_time: str
    slot_minutes: int
    buffer_minutes: int = 0
    allow_customer_booking: bool = True
    slot_capacity: int = 1
    capacity_match: CapacityMatch = CapacityMatch.OVERLAP

    def validate(self) -> None:
        """Check the configuration invariants."""
        ensure_timezone(self.timezone)

        if parse_clock_time(self.open_time) >= parse_clock_time(self.close_time):
            raise ConfigurationError(
                f"Opening time {self.open_time} must be before closing time {self.close_time}; "
                f"overnight business hours are not supported"
            )
        if not _is_int(self.slot_minutes) or self.slot_minutes <= 0:
            raise ConfigurationError(f"slot_minutes must be a positive integer, got {self.slot_minutes!r}")
        if not _is_int(self.buffer_minutes) or self.buffer_minutes < 0:
            raise ConfigurationError(f"buffer_minutes must be zero or positive, got {self.buffer_minutes!r}")
        if not _is_int(self.slot_capacity) or self.slot_capacity < 1:
            raise ConfigurationError(f"slot_capacity must be at least 1, got {self.slot_capacity!r}")
        try:
            CapacityMatch(self.capacity_match)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown capacity_match '{self.capacity_match}'") from exc

    @property
    def step_minutes(self) -> int:
        """Distance between the starts of two consecutive slots."""
        return self.slot_minutes + self.buffer_minutes


@dataclass
class Slot:
    """
    A bookable interval with its remaining capacity.
    """
    interval: TimeInterval
    capacity: int

    @property
    def is_available(self) -> bool:
        return self.capacity > 0


@dataclass(frozen=True)
class Employee:
    """Roster entry used to label resolver output."""
    id: str
    full_name: str
    title: Optional[str] = None
    hourly_rate: Optional[float] = None


@dataclass(frozen=True)
class Booking:
    """Read-only snapshot of a booking."""
    id: str
    start_at: DateTime
    end_at: DateTime
    status: BookingStatus
    booking_type: BookingType = BookingType.PREBOOKING
    customer_id: Optional[str] = None
    employee_id: Optional[str] = None

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(start=self.start_at, end=self.end_at)

    @property
    def counts_against_capacity(self) -> bool:
        return self.status not in TERMINAL_BOOKING_STATUSES


@dataclass(frozen=True)
class WorkAssignment:
    """
    Read-only snapshot of a work order, timed by its booking.

    ``start_at``/``end_at`` may be missing when the booking record is
    incomplete; ``interval()`` then raises ``InvalidIntervalError``.
    """
    id: str
    employee_id: Optional[str]
    status: WorkOrderStatus
    start_at: Optional[DateTime] = None
    end_at: Optional[DateTime] = None
    booking_id: Optional[str] = None

    @property
    def occupies_employee(self) -> bool:
        return self.status in OCCUPYING_WORK_ORDER_STATUSES

    def interval(self) -> TimeInterval:
        return TimeInterval(start=self.start_at, end=self.end_at)


@dataclass(frozen=True)
class BusyEmployee:
    """An employee occupied during the requested window."""
    employee: Employee
    busy_until: DateTime
    busy_from: DateTime
    conflicts: int = 1


@dataclass(frozen=True)
class AvailabilitySummary:
    total_employees: int
    available_count: int
    busy_count: int


@dataclass
class AvailabilityResult:
    """
    Partition of the roster for one requested window.
    """
    window: TimeInterval
    available: List[Employee] = field(default_factory=list)
    busy: List[BusyEmployee] = field(default_factory=list)

    @property
    def summary(self) -> AvailabilitySummary:
        return AvailabilitySummary(
            total_employees=len(self.available) + len(self.busy),
            available_count=len(self.available),
            busy_count=len(self.busy),
        )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
