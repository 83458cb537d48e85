"""
Employee availability for a requested time window.

An employee is busy when at least one of their occupying work assignments
(ASSIGNED, IN_PROGRESS or WAITING) overlaps the window; everyone else on the
roster is available.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .calendar import InstantLike, to_instant
from .exceptions import InvalidIntervalError
from .models import (
    AvailabilityResult,
    BusyEmployee,
    Employee,
    TimeInterval,
    WorkAssignment,
)

logger = logging.getLogger(__name__)


def occupying_conflicts(
    window: TimeInterval,
    assignments: Iterable[WorkAssignment],
    employee_id: Optional[str] = None
) -> Dict[str, List[TimeInterval]]:
    """
    Group the occupying assignments that overlap ``window`` by employee.

    Assignments with missing or malformed times are logged and skipped;
    they never abort the computation for anyone else.

    Args:
        window: Requested interval
        assignments: Work assignment snapshot
        employee_id: Restrict the result to a single employee

    Returns:
        Dict mapping employee id to the conflicting intervals
    """
    conflicts: Dict[str, List[TimeInterval]] = {}

    for assignment in assignments:
        if not assignment.occupies_employee or not assignment.employee_id:
            continue
        if employee_id is not None and assignment.employee_id != employee_id:
            continue

        try:
            interval = assignment.interval()
        except InvalidIntervalError as exc:
            logger.warning(
                "Skipping work assignment %s of employee %s: %s",
                assignment.id,
                assignment.employee_id,
                exc,
            )
            continue

        if interval.overlaps(window):
            conflicts.setdefault(assignment.employee_id, []).append(interval)

    return conflicts


class AvailabilityResolver:
    """
    Partitions a roster into available and busy employees.
    """

    def resolve(
        self,
        window: TimeInterval,
        employees: Sequence[Employee],
        assignments: Iterable[WorkAssignment]
    ) -> AvailabilityResult:
        """
        Evaluate every roster entry against the window.

        Every employee ends up in exactly one of the two lists. Both lists
        are ordered by full name (ordinal, stable).
        """
        conflicts = occupying_conflicts(window, assignments)

        available: List[Employee] = []
        busy: List[BusyEmployee] = []

        for employee in employees:
            hits = conflicts.get(employee.id)
            if not hits:
                available.append(employee)
                continue

            busy.append(
                BusyEmployee(
                    employee=employee,
                    busy_until=max(interval.end for interval in hits),
                    busy_from=min(interval.start for interval in hits),
                    conflicts=len(hits),
                )
            )

        available.sort(key=lambda employee: employee.full_name)
        busy.sort(key=lambda entry: entry.employee.full_name)

        logger.debug(
            "Availability for %s: %d available, %d busy",
            window,
            len(available),
            len(busy),
        )
        return AvailabilityResult(window=window, available=available, busy=busy)


def resolve_availability(
    requested_start: InstantLike,
    duration_minutes: int,
    employees: Sequence[Employee],
    assignments: Iterable[WorkAssignment]
) -> AvailabilityResult:
    """
    Partition ``employees`` for the window starting at ``requested_start``.

    Raises:
        InvalidIntervalError: If the start is unusable or the duration is not positive
    """
    window = TimeInterval.from_duration(requested_start, duration_minutes)
    return AvailabilityResolver().resolve(window, employees, assignments)


def resolve_availability_between(
    start: InstantLike,
    end: InstantLike,
    employees: Sequence[Employee],
    assignments: Iterable[WorkAssignment]
) -> AvailabilityResult:
    """Partition ``employees`` for an explicit ``[start, end)`` window."""
    window = TimeInterval(start=to_instant(start), end=to_instant(end))
    return AvailabilityResolver().resolve(window, employees, assignments)
