"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .scheduling import SchedulingService, SnapshotSource

__all__ = ["SchedulingService", "SnapshotSource"]
