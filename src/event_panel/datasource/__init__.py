"""Data sources that serve triggers and events to the pipeline."""

from .base import EventDataSource
from .snapshot import SnapshotDataSource

__all__ = ["EventDataSource", "SnapshotDataSource"]
