"""Pure domain types for employee task histories - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .days import today_label

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


def canonical_name(name: str) -> str:
    """Join key for employee names: trimmed and case-folded."""
    return name.strip().casefold()


class TaskBucket(Enum):
    """Status bucket a task sits in."""

    TODO = "todo"
    PENDING = "pending"
    COMPLETE = "complete"

    @classmethod
    def parse(cls, value: "str | TaskBucket") -> "TaskBucket":
        if isinstance(value, cls):
            return value
        return cls(value.strip().lower())


class Group(Enum):
    """Organizational group. Values are the backend sheet titles."""

    DEV = "DEV"
    MANAGERS = "Managers"

    @classmethod
    def parse(cls, value: "str | Group | None") -> "Group":
        """Accept any case variant ("Dev", "dev", "DEV"). None means DEV."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.DEV
        key = value.strip().casefold()
        for group in cls:
            if group.value.casefold() == key:
                return group
        raise ValueError(f"Unknown group: {value!r}")


@dataclass
class DayRecord:
    """One day's tasks for one employee, split by bucket."""

    date: str
    todo: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    complete: list[str] = field(default_factory=list)

    def bucket(self, bucket: TaskBucket) -> list[str]:
        return getattr(self, bucket.value)

    def match(self, task_text: str) -> tuple[TaskBucket, str] | None:
        """
        Bucket and stored text of a task.

        Matched case-insensitively, as the sheet backend matches task cells.
        """
        key = task_text.casefold()
        for bucket in TaskBucket:
            for existing in self.bucket(bucket):
                if existing.casefold() == key:
                    return bucket, existing
        return None

    def find(self, task_text: str) -> TaskBucket | None:
        """Bucket currently holding a task."""
        found = self.match(task_text)
        return found[0] if found else None

    @property
    def is_empty(self) -> bool:
        return not (self.todo or self.pending or self.complete)

    @classmethod
    def from_api(cls, data: dict) -> "DayRecord":
        return cls(
            date=data.get("date") or "",
            todo=list(data.get("todo") or []),
            pending=list(data.get("pending") or []),
            complete=list(data.get("complete") or []),
        )

    def to_api(self) -> dict:
        return {
            "date": self.date,
            "todo": list(self.todo),
            "pending": list(self.pending),
            "complete": list(self.complete),
        }


@dataclass
class EmployeeHistory:
    """An employee's task history as held by the system of record."""

    employee_name: str
    group: Group
    history: list[DayRecord] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "EmployeeHistory":
        # The backend reports the sheet title; older producers send role/group.
        raw_group = data.get("sheet_name") or data.get("role") or data.get("group")
        try:
            group = Group.parse(raw_group)
        except ValueError:
            logger.warning(f"Unknown group {raw_group!r} for {data.get('employee_name')!r}, using DEV")
            group = Group.DEV
        return cls(
            employee_name=data.get("employee_name") or "",
            group=group,
            history=[DayRecord.from_api(d) for d in data.get("history") or []],
        )


@dataclass
class EmployeeMetadata:
    """Static employee details kept outside the spreadsheet."""

    employee_id: str
    employee_name: str
    project_name: str

    @classmethod
    def from_api(cls, data: dict) -> "EmployeeMetadata":
        return cls(
            employee_id=data.get("employee_id") or "",
            employee_name=data.get("employee_name") or "",
            project_name=data.get("project_name") or "",
        )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None


@dataclass
class DailyLog:
    """When an employee's task set for a day was first and last written."""

    employee_name: str
    task_date: str
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_api(cls, data: dict) -> "DailyLog":
        return cls(
            employee_name=data.get("employee_name") or "",
            task_date=data.get("task_date") or "",
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass
class MergedEmployeeView:
    """
    One employee's history joined with metadata and logs.

    Built fresh by the reconciler on every refresh; never persisted.
    """

    employee_name: str
    group: Group
    history: list[DayRecord]
    metadata: EmployeeMetadata | None = None
    logs: list[DailyLog] = field(default_factory=list)

    @property
    def employee_id(self) -> str:
        return self.metadata.employee_id if self.metadata else UNKNOWN

    @property
    def project_name(self) -> str:
        return self.metadata.project_name if self.metadata else UNKNOWN

    def log_for(self, day: str) -> DailyLog | None:
        """Log row for a day label, if one was recorded."""
        return next((log for log in self.logs if log.task_date == day), None)

    def day(self, day: str) -> DayRecord | None:
        return next((d for d in self.history if d.date == day), None)

    def today_record(self, now: datetime | None = None) -> DayRecord | None:
        """The mutable day's record, if the history has one."""
        return self.day(today_label(now))
