"""
Bookable slot generation for a single business day.

Pure domain logic: the caller supplies the configuration and a snapshot of
the day's bookings; nothing is fetched or written here.
"""

import logging
from typing import Iterable, List, Optional

from pendulum import DateTime

from .calendar import DateLike, day_bounds
from .exceptions import ConfigurationError
from .models import Booking, BusinessHoursConfig, CapacityMatch, Slot, TimeInterval

logger = logging.getLogger(__name__)


class SlotResolver:
    """
    Builds the slot grid of a business day and annotates each slot with its
    remaining capacity.

    Algorithm:
    1. Resolve the absolute open/close instants of the local date
    2. Walk from opening time in steps of slot + buffer minutes
    3. Drop the trailing slot if it would end after closing time
    4. Subtract one unit of capacity per counting booking matching the slot
    """

    def __init__(self, config: BusinessHoursConfig):
        self.config = config

    def resolve(
        self,
        date: DateLike,
        bookings: Iterable[Booking] = (),
        capacity: Optional[int] = None
    ) -> List[Slot]:
        """
        Compute the slots of ``date`` in ascending start order.

        Args:
            date: Local calendar date (YYYY-MM-DD)
            bookings: Bookings overlapping the date; terminal ones are ignored
            capacity: Per-slot capacity overriding ``config.slot_capacity``
                (e.g. the number of active employees)

        Returns:
            All slots of the day, including fully booked ones

        Raises:
            ConfigurationError: If the business hours are invalid
            InvalidDateError: If the date cannot be parsed
        """
        self.config.validate()
        base_capacity = self._base_capacity(capacity)

        intervals = self._build_grid(date)
        counting = [booking for booking in bookings if booking.counts_against_capacity]
        match = CapacityMatch(self.config.capacity_match)

        slots: List[Slot] = []
        for interval in intervals:
            taken = sum(1 for booking in counting if self._matches(interval, booking.interval, match))
            slots.append(Slot(interval=interval, capacity=max(base_capacity - taken, 0)))

        logger.debug(
            "Resolved %d slots for %s (%d counting bookings, %d full)",
            len(slots),
            date,
            len(counting),
            sum(1 for slot in slots if not slot.is_available),
        )
        return slots

    def _build_grid(self, date: DateLike) -> List[TimeInterval]:
        """
        Generate slot intervals between opening and closing time.

        Walks minute offsets from opening time in UTC, so the step is absolute
        time on DST transition days. Instants are only built for offsets that
        fit the business day.
        """
        config = self.config
        bounds = day_bounds(date, config.timezone, config.open_time, config.close_time)
        open_instant: DateTime = bounds.open_instant.in_timezone("UTC")
        day_minutes = int((bounds.close_instant - bounds.open_instant).total_seconds() // 60)

        intervals: List[TimeInterval] = []
        offset = 0

        while offset + config.slot_minutes <= day_minutes:
            intervals.append(
                TimeInterval(
                    start=open_instant.add(minutes=offset),
                    end=open_instant.add(minutes=offset + config.slot_minutes)
                )
            )
            offset += config.step_minutes

        return intervals

    def _base_capacity(self, capacity: Optional[int]) -> int:
        if capacity is None:
            return self.config.slot_capacity
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ConfigurationError(f"Slot capacity must be a non-negative integer, got {capacity!r}")
        return capacity

    @staticmethod
    def _matches(slot: TimeInterval, booked: TimeInterval, match: CapacityMatch) -> bool:
        if match is CapacityMatch.EXACT:
            return slot.start == booked.start and slot.end == booked.end
        return slot.overlaps(booked)


def resolve_slots(
    date: DateLike,
    config: BusinessHoursConfig,
    bookings: Iterable[Booking] = (),
    capacity: Optional[int] = None
) -> List[Slot]:
    """Compute the bookable slots of ``date``; see ``SlotResolver.resolve``."""
    return SlotResolver(config).resolve(date, bookings, capacity=capacity)
