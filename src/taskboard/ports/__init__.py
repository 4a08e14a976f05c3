"""Ports - interfaces/protocols for external dependencies."""

from .task_sheet import TaskSheet
from .record_store import RecordStore

__all__ = [
    "TaskSheet",
    "RecordStore",
]
