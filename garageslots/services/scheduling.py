"""
Application services for slot and availability queries.

The service fetches snapshots through a ``SnapshotSource`` and delegates all
computation to the pure domain resolvers. This keeps HTTP handlers and the
CLI thin, and the persistence dependency can be replaced by a stub in tests.

The resolvers only read snapshots. Whoever writes a booking based on their
output must re-check capacity/overlap inside the same transaction as the
insert; two callers acting on the same stale snapshot can otherwise both
take the last unit of a slot.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.availability_resolver import AvailabilityResolver
from ..domain.booking_rules import (
    WalkinPlan,
    find_customer_conflict,
    plan_walkin_assignment,
    validate_prebooking,
)
from ..domain.calendar import DateLike, InstantLike, day_bounds, to_instant
from ..domain.exceptions import BookingConflictError, ConfigurationError
from ..domain.models import (
    AvailabilityResult,
    Booking,
    BusinessHoursConfig,
    Employee,
    Slot,
    TimeInterval,
    WorkAssignment,
)
from ..domain.slot_resolver import SlotResolver

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


class SnapshotSource(Protocol):
    """Protocol describing the persistence reads needed by the service."""

    async def get_business_hours(self) -> Optional[BusinessHoursConfig]:
        """Return the business-hours configuration, if any."""

    async def get_bookings(self, start: DateTime, end: DateTime) -> List[Booking]:
        """Return non-terminal bookings overlapping ``[start, end)``."""

    async def get_employees(self) -> List[Employee]:
        """Return the active employee roster."""

    async def get_assignments(self, start: DateTime, end: DateTime) -> List[WorkAssignment]:
        """Return occupying work assignments overlapping ``[start, end)``."""


class SchedulingService:
    """
    Orchestrates snapshot retrieval and the scheduling resolvers.
    """

    def __init__(
        self,
        source: SnapshotSource,
        default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> None:
        self._source = source
        self._default_duration_minutes = default_duration_minutes

    async def business_hours(self) -> BusinessHoursConfig:
        """
        Fetch the business-hours configuration.

        Raises:
            ConfigurationError: If none is configured
        """
        config = await self._source.get_business_hours()
        if config is None:
            raise ConfigurationError("Business settings not configured")
        return config

    async def slots_for_date(self, date: DateLike, capacity: Optional[int] = None) -> List[Slot]:
        """Compute the slots of a local calendar date."""
        config = await self.business_hours()
        config.validate()

        bounds = day_bounds(date, config.timezone, config.open_time, config.close_time)
        bookings = await self._source.get_bookings(bounds.open_instant, bounds.close_instant)

        return SlotResolver(config).resolve(date, bookings, capacity=capacity)

    async def employee_availability(
        self,
        start: Optional[InstantLike] = None,
        duration_minutes: Optional[int] = None,
    ) -> AvailabilityResult:
        """
        Partition the roster for a window.

        Defaults to a window starting now with the configured default duration.
        """
        window = TimeInterval.from_duration(
            to_instant(start) if start is not None else pendulum.now("UTC"),
            duration_minutes if duration_minutes is not None else self._default_duration_minutes,
        )

        employees = await self._source.get_employees()
        assignments = await self._source.get_assignments(window.start, window.end)

        return AvailabilityResolver().resolve(window, employees, assignments)

    async def check_prebooking(
        self,
        *,
        customer_id: str,
        start: InstantLike,
        duration_minutes: int,
        now: Optional[InstantLike] = None,
    ) -> TimeInterval:
        """
        Validate a customer pre-booking against business rules.

        Raises:
            BookingNotAllowedError: If customers may not book online
            OutsideBusinessHoursError: If the window leaves the business day
            BookingConflictError: If the customer already holds an overlapping pre-booking
        """
        config = await self.business_hours()
        window = validate_prebooking(start, duration_minutes, config, now=now)

        bookings = await self._source.get_bookings(window.start, window.end)
        conflict = find_customer_conflict(customer_id, window, bookings)
        if conflict is not None:
            logger.info("Customer %s already holds booking %s at %s", customer_id, conflict.id, conflict.interval)
            raise BookingConflictError("You already have a booking in this time range")

        return window

    async def plan_walkin(
        self,
        *,
        employee_id: Optional[str],
        duration_minutes: int,
        now: Optional[InstantLike] = None,
    ) -> WalkinPlan:
        """Plan a walk-in starting immediately."""
        window = TimeInterval.from_duration(
            to_instant(now) if now is not None else pendulum.now("UTC"),
            duration_minutes,
        )
        assignments = await self._source.get_assignments(window.start, window.end)

        return plan_walkin_assignment(employee_id, window, assignments)
