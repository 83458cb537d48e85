"""
Booking-type rules for pre-bookings and walk-ins.

Pre-bookings are requested by customers for a future window and must fit the
business day; walk-ins start immediately and are either assigned to the
requested employee, parked as WAITING behind that employee's current work,
or left OPEN for anyone to pick up.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import pendulum
from pendulum import DateTime

from .availability_resolver import occupying_conflicts
from .calendar import InstantLike, day_bounds, to_instant
from .exceptions import BookingNotAllowedError, InvalidIntervalError, OutsideBusinessHoursError
from .models import (
    Booking,
    BookingType,
    BusinessHoursConfig,
    TimeInterval,
    WorkAssignment,
    WorkOrderStatus,
)


@dataclass(frozen=True)
class WalkinPlan:
    """Outcome of placing a walk-in with an optional employee."""
    window: TimeInterval
    status: WorkOrderStatus
    employee_id: Optional[str] = None
    busy_until: Optional[DateTime] = None
    conflicts: int = 0

    @property
    def employee_available(self) -> bool:
        return self.status is WorkOrderStatus.ASSIGNED


def validate_prebooking(
    start: InstantLike,
    duration_minutes: int,
    config: BusinessHoursConfig,
    now: Optional[InstantLike] = None
) -> TimeInterval:
    """
    Validate a customer pre-booking request.

    Args:
        start: Requested start instant
        duration_minutes: Total duration of the booked services
        config: Business-hours configuration
        now: Reference instant (defaults to the current time)

    Returns:
        The requested window

    Raises:
        ConfigurationError: If the business hours are invalid
        BookingNotAllowedError: If customers may not book online
        InvalidIntervalError: If the window is empty or not in the future
        OutsideBusinessHoursError: If the window leaves the business day
    """
    config.validate()
    if not config.allow_customer_booking:
        raise BookingNotAllowedError("Online booking by customers is currently disabled")

    window = TimeInterval.from_duration(start, duration_minutes)
    reference = to_instant(now) if now is not None else pendulum.now("UTC")
    if window.start <= reference:
        raise InvalidIntervalError("Pre-booking time must be in the future")

    local_start, local_end = window.local_bounds(config.timezone)
    bounds = day_bounds(local_start.date(), config.timezone, config.open_time, config.close_time)
    business_day = TimeInterval(start=bounds.open_instant, end=bounds.close_instant)

    if not business_day.contains(window):
        raise OutsideBusinessHoursError(
            f"Booking time ({local_start.format('HH:mm')}-{local_end.format('HH:mm')}) "
            f"exceeds working hours ({config.open_time}-{config.close_time})"
        )

    return window


def find_customer_conflict(
    customer_id: str,
    window: TimeInterval,
    bookings: Iterable[Booking]
) -> Optional[Booking]:
    """
    Find the customer's earliest active pre-booking overlapping ``window``.
    """
    candidates = [
        booking for booking in bookings
        if booking.customer_id == customer_id
        and booking.booking_type == BookingType.PREBOOKING
        and booking.counts_against_capacity
        and booking.interval.overlaps(window)
    ]
    if not candidates:
        return None

    return min(candidates, key=lambda booking: booking.start_at)


def plan_walkin_assignment(
    employee_id: Optional[str],
    window: TimeInterval,
    assignments: Iterable[WorkAssignment]
) -> WalkinPlan:
    """
    Decide the work order status of a walk-in.

    - no employee requested: OPEN
    - requested employee busy during the window: WAITING, with busy_until
    - otherwise: ASSIGNED
    """
    if not employee_id:
        return WalkinPlan(window=window, status=WorkOrderStatus.OPEN)

    hits = occupying_conflicts(window, assignments, employee_id=employee_id).get(employee_id, [])
    if not hits:
        return WalkinPlan(window=window, status=WorkOrderStatus.ASSIGNED, employee_id=employee_id)

    return WalkinPlan(
        window=window,
        status=WorkOrderStatus.WAITING,
        employee_id=employee_id,
        busy_until=max(interval.end for interval in hits),
        conflicts=len(hits),
    )
