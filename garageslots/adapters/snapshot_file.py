"""
File-backed snapshot source.

Reads business settings, employees, bookings and work orders exported from
the garage database into a YAML or JSON file, so the resolvers can be run
without a live database.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pendulum import DateTime

from ..domain.calendar import to_instant
from ..domain.exceptions import ConfigurationError, InvalidIntervalError
from ..domain.models import (
    Booking,
    BookingStatus,
    BookingType,
    BusinessHoursConfig,
    CapacityMatch,
    Employee,
    TimeInterval,
    WorkAssignment,
    WorkOrderStatus,
)

logger = logging.getLogger(__name__)


class SnapshotFileSource:
    """
    ``SnapshotSource`` implementation over a YAML/JSON snapshot file.

    Expected top-level keys: ``business_settings``, ``employees``,
    ``bookings`` and ``work_orders``. Keys may be snake_case or the
    camelCase used by the web application's export.
    """

    def __init__(
        self,
        snapshot_path: Path,
        business_hours: Optional[BusinessHoursConfig] = None
    ):
        """
        Initialize the source.

        Args:
            snapshot_path: Path to the snapshot file
            business_hours: Configuration overriding the file's business settings

        Raises:
            FileNotFoundError: If the snapshot file doesn't exist
            ConfigurationError: If the file cannot be parsed
        """
        self.snapshot_path = snapshot_path
        self._business_hours_override = business_hours
        self._data = self._load(snapshot_path)

        self.employees = self._parse_employees(self._data.get("employees") or [])
        self.bookings = self._parse_bookings(self._data.get("bookings") or [])
        self.assignments = self._parse_work_orders(
            self._data.get("work_orders") or self._data.get("workOrders") or []
        )

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Invalid snapshot file {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Snapshot file must contain a mapping at the root level.")

        return data

    async def get_business_hours(self) -> Optional[BusinessHoursConfig]:
        if self._business_hours_override is not None:
            return self._business_hours_override

        settings = self._data.get("business_settings") or self._data.get("businessSettings")
        if not settings:
            return None

        return BusinessHoursConfig(
            timezone=_pick(settings, "timezone"),
            open_time=_pick(settings, "open_time", "openTime"),
            close_time=_pick(settings, "close_time", "closeTime"),
            slot_minutes=_pick(settings, "slot_minutes", "slotMinutes"),
            buffer_minutes=_pick(settings, "buffer_minutes", "bufferMinutes", default=0),
            allow_customer_booking=_pick(
                settings, "allow_customer_booking", "allowCustomerBooking", default=True
            ),
            slot_capacity=_pick(settings, "slot_capacity", "slotCapacity", default=1),
            capacity_match=_pick(
                settings, "capacity_match", "capacityMatch", default=CapacityMatch.OVERLAP
            ),
        )

    async def get_bookings(self, start: DateTime, end: DateTime) -> List[Booking]:
        window = TimeInterval(start=start, end=end)
        return [
            booking for booking in self.bookings
            if booking.counts_against_capacity and booking.interval.overlaps(window)
        ]

    async def get_employees(self) -> List[Employee]:
        return list(self.employees)

    async def get_assignments(self, start: DateTime, end: DateTime) -> List[WorkAssignment]:
        window = TimeInterval(start=start, end=end)
        selected: List[WorkAssignment] = []

        for assignment in self.assignments:
            if not assignment.occupies_employee:
                continue
            try:
                if not assignment.interval().overlaps(window):
                    continue
            except InvalidIntervalError:
                # Handed on so the resolver reports it
                pass
            selected.append(assignment)

        return selected

    def _parse_employees(self, records: List[Dict[str, Any]]) -> List[Employee]:
        employees: List[Employee] = []

        for record in records:
            employee_id = _pick(record, "id")
            full_name = _pick(record, "full_name", "fullName")
            if employee_id is None or not full_name:
                logger.warning("Skipping employee record without id or name: %r", record)
                continue

            employees.append(
                Employee(
                    id=str(employee_id),
                    full_name=str(full_name),
                    title=_pick(record, "title"),
                    hourly_rate=_pick(record, "hourly_rate", "hourlyRate"),
                )
            )

        return employees

    def _parse_bookings(self, records: List[Dict[str, Any]]) -> List[Booking]:
        bookings: List[Booking] = []

        for record in records:
            try:
                interval = TimeInterval(
                    start=to_instant(_pick(record, "start_at", "startAt")),
                    end=to_instant(_pick(record, "end_at", "endAt")),
                )
                booking = Booking(
                    id=str(_pick(record, "id")),
                    start_at=interval.start,
                    end_at=interval.end,
                    status=BookingStatus(_pick(record, "status")),
                    booking_type=BookingType(
                        _pick(record, "booking_type", "bookingType", default=BookingType.PREBOOKING)
                    ),
                    customer_id=_optional_str(_pick(record, "customer_id", "customerId")),
                    employee_id=_optional_str(_pick(record, "employee_id", "employeeId")),
                )
            except ValueError as exc:
                logger.warning("Skipping booking record %r: %s", _pick(record, "id"), exc)
                continue

            bookings.append(booking)

        return bookings

    def _parse_work_orders(self, records: List[Dict[str, Any]]) -> List[WorkAssignment]:
        assignments: List[WorkAssignment] = []

        for record in records:
            try:
                status = WorkOrderStatus(_pick(record, "status"))
            except ValueError as exc:
                logger.warning("Skipping work order %r: %s", _pick(record, "id"), exc)
                continue

            # Times normally come from the linked booking
            booking = _pick(record, "booking") or {}
            assignments.append(
                WorkAssignment(
                    id=str(_pick(record, "id")),
                    employee_id=_optional_str(_pick(record, "employee_id", "employeeId")),
                    status=status,
                    start_at=_lenient_instant(
                        _pick(record, "start_at", "startAt") or _pick(booking, "start_at", "startAt")
                    ),
                    end_at=_lenient_instant(
                        _pick(record, "end_at", "endAt") or _pick(booking, "end_at", "endAt")
                    ),
                    booking_id=_optional_str(_pick(record, "booking_id", "bookingId")),
                )
            )

        return assignments


def _pick(record: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key of ``record``."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _lenient_instant(value: Any) -> Optional[DateTime]:
    """Parse an instant, keeping broken values as None."""
    if value is None:
        return None
    try:
        return to_instant(value)
    except InvalidIntervalError:
        return None
