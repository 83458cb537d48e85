"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .availability_resolver import AvailabilityResolver, resolve_availability, resolve_availability_between
from .booking_rules import WalkinPlan, find_customer_conflict, plan_walkin_assignment, validate_prebooking
from .calendar import DayBounds, day_bounds, local_minutes
from .exceptions import (
    BookingConflictError,
    BookingNotAllowedError,
    ConfigurationError,
    InvalidDateError,
    InvalidIntervalError,
    InvalidRequestError,
    OutsideBusinessHoursError,
    SchedulingError,
)
from .intervals import overlaps
from .models import (
    AvailabilityResult,
    Booking,
    BookingStatus,
    BookingType,
    BusinessHoursConfig,
    BusyEmployee,
    CapacityMatch,
    Employee,
    Slot,
    TimeInterval,
    WorkAssignment,
    WorkOrderStatus,
)
from .slot_resolver import SlotResolver, resolve_slots

__all__ = [
    "AvailabilityResolver",
    "AvailabilityResult",
    "Booking",
    "BookingConflictError",
    "BookingNotAllowedError",
    "BookingStatus",
    "BookingType",
    "BusinessHoursConfig",
    "BusyEmployee",
    "CapacityMatch",
    "ConfigurationError",
    "DayBounds",
    "Employee",
    "InvalidDateError",
    "InvalidIntervalError",
    "InvalidRequestError",
    "OutsideBusinessHoursError",
    "SchedulingError",
    "Slot",
    "SlotResolver",
    "TimeInterval",
    "WalkinPlan",
    "WorkAssignment",
    "WorkOrderStatus",
    "day_bounds",
    "find_customer_conflict",
    "local_minutes",
    "overlaps",
    "plan_walkin_assignment",
    "resolve_availability",
    "resolve_availability_between",
    "resolve_slots",
    "validate_prebooking",
]
