"""
Adapters layer - Snapshot sources for the scheduling service.
"""

from .snapshot_file import SnapshotFileSource

__all__ = ["SnapshotFileSource"]
