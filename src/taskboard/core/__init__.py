"""Functional core - pure business logic with no I/O."""

from .days import format_day_label, is_mutable, today_label
from .errors import (
    AuxiliaryUnavailable,
    EditRejected,
    SourceUnavailable,
    TaskboardError,
    WriteFailed,
)
from .models import (
    DailyLog,
    DayRecord,
    EmployeeHistory,
    EmployeeMetadata,
    Group,
    MergedEmployeeView,
    TaskBucket,
    canonical_name,
)
from .reconcile import find_employee, merge
from .transitions import LogTouch, Submission, TaskWrite, Transition, plan_submission, plan_transition

__all__ = [
    # Days
    "format_day_label",
    "is_mutable",
    "today_label",
    # Errors
    "TaskboardError",
    "SourceUnavailable",
    "AuxiliaryUnavailable",
    "EditRejected",
    "WriteFailed",
    # Models
    "TaskBucket",
    "Group",
    "DayRecord",
    "EmployeeHistory",
    "EmployeeMetadata",
    "DailyLog",
    "MergedEmployeeView",
    "canonical_name",
    # Reconciler
    "merge",
    "find_employee",
    # Transitions
    "TaskWrite",
    "LogTouch",
    "Transition",
    "Submission",
    "plan_transition",
    "plan_submission",
]
