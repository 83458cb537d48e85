"""
Interval overlap primitive shared by every scheduling check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TimeInterval


def overlaps(a: "TimeInterval", b: "TimeInterval") -> bool:
    """
    Check whether two half-open intervals ``[start, end)`` overlap.

    Touching intervals (one ends exactly when the other starts) do not
    overlap.
    """
    return a.start < b.end and b.start < a.end
