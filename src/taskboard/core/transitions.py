"""Task transition planning - pure, no I/O.

A transition moves one task between status buckets on today's record. It is
planned here as a pair of writes (task write, then log touch) and executed
by the workflow layer. Tasks are identified by their literal text.
"""

from dataclasses import dataclass
from datetime import datetime

from .days import is_mutable, today_label
from .errors import EditRejected
from .models import DayRecord, Group, TaskBucket


@dataclass(frozen=True)
class TaskWrite:
    """A write of task statuses to one employee's record for one day."""

    employee_name: str
    group: Group
    day: str
    tasks: tuple[tuple[str, TaskBucket], ...]
    employee_code: str = ""

    def to_payload(self) -> dict:
        """Request body for POST /task."""
        payload = {
            "employee_name": self.employee_name,
            "role": self.group.value,
            "date": self.day,
            "tasks": [{"task": text, "status": bucket.value} for text, bucket in self.tasks],
        }
        if self.employee_code:
            payload["employee_code"] = self.employee_code
        return payload

    def apply(self, record: DayRecord | None) -> DayRecord:
        """
        Project this write onto a day record.

        Each task is upserted: a task already in its target bucket stays put,
        otherwise it leaves whichever bucket holds it and is appended to the
        target. Texts match case-insensitively and an existing task keeps its
        stored text. A task never ends up in two buckets.
        """
        if record is None:
            record = DayRecord(date=self.day)
        result = DayRecord(
            date=record.date,
            todo=list(record.todo),
            pending=list(record.pending),
            complete=list(record.complete),
        )
        for text, target in self.tasks:
            found = result.match(text)
            if found is None:
                result.bucket(target).append(text)
                continue
            current, stored = found
            if current != target:
                result.bucket(current).remove(stored)
                result.bucket(target).append(stored)
        return result


@dataclass(frozen=True)
class LogTouch:
    """Create or refresh the daily log row for (employee, day)."""

    employee_name: str
    task_date: str

    def to_payload(self) -> dict:
        """Request body for POST /logs."""
        return {"employee_name": self.employee_name, "task_date": self.task_date}


@dataclass(frozen=True)
class Transition:
    """The writes for one accepted edit, issued in field order."""

    task_write: TaskWrite
    log_touch: LogTouch
    from_bucket: TaskBucket | None = None
    to_bucket: TaskBucket | None = None

    @property
    def is_noop(self) -> bool:
        """Status unchanged; the log is still touched."""
        return self.from_bucket is not None and self.from_bucket == self.to_bucket


@dataclass(frozen=True)
class Submission:
    """A full day's task set, plus the metadata sent alongside it."""

    transition: Transition
    employee_id: str = ""
    project_name: str = ""

    def metadata_payload(self) -> dict:
        """Request body for POST /metadata."""
        return {
            "employee_id": self.employee_id,
            "employee_name": self.transition.task_write.employee_name,
            "project_name": self.project_name,
        }


def _require_mutable(day: str, now: datetime | None) -> None:
    if not is_mutable(day, now):
        raise EditRejected(f"{day} is locked; only today ({today_label(now)}) can be edited")


def _require_name(employee: str) -> str:
    name = employee.strip()
    if not name:
        raise EditRejected("Employee name is required")
    return name


def plan_transition(
    employee: str,
    group: Group | str,
    task_text: str,
    from_bucket: TaskBucket | str,
    to_bucket: TaskBucket | str,
    day: str,
    now: datetime | None = None,
) -> Transition:
    """
    Plan moving one task from one bucket to another on today's record.

    The caller must have read `task_text` in `from_bucket` just before;
    there is no versioning and the last write wins. Moving a task to the
    bucket it already sits in is allowed and still touches the log.

    Raises EditRejected if `day` is not today or the request is malformed.
    """
    name = _require_name(employee)
    text = task_text.strip()
    if not text:
        raise EditRejected("Task text is required")
    try:
        group = Group.parse(group)
        source = TaskBucket.parse(from_bucket)
        target = TaskBucket.parse(to_bucket)
    except ValueError as e:
        raise EditRejected(str(e)) from e
    _require_mutable(day, now)

    return Transition(
        task_write=TaskWrite(employee_name=name, group=group, day=day, tasks=((text, target),)),
        log_touch=LogTouch(employee_name=name, task_date=today_label(now)),
        from_bucket=source,
        to_bucket=target,
    )


def plan_submission(
    employee: str,
    group: Group | str,
    day: str,
    todo: list[str] | None = None,
    pending: list[str] | None = None,
    complete: list[str] | None = None,
    employee_id: str = "",
    project_name: str = "",
    now: datetime | None = None,
) -> Submission:
    """
    Plan writing a whole day's task set for an employee.

    Empty buckets are fine. An empty submission, a blank task, or the same
    text in two buckets is rejected. Texts are compared case-insensitively.
    """
    name = _require_name(employee)
    try:
        group = Group.parse(group)
    except ValueError as e:
        raise EditRejected(str(e)) from e

    tasks: list[tuple[str, TaskBucket]] = []
    seen: dict[str, TaskBucket] = {}
    for bucket, texts in (
        (TaskBucket.TODO, todo),
        (TaskBucket.PENDING, pending),
        (TaskBucket.COMPLETE, complete),
    ):
        for raw in texts or []:
            text = raw.strip()
            if not text:
                raise EditRejected("All tasks must have a description")
            key = text.casefold()
            if key in seen:
                if seen[key] != bucket:
                    raise EditRejected(f"Task {text!r} is listed as both {seen[key].value} and {bucket.value}")
                continue
            seen[key] = bucket
            tasks.append((text, bucket))

    if not tasks:
        raise EditRejected("At least one task is required")
    _require_mutable(day, now)

    write = TaskWrite(
        employee_name=name,
        group=group,
        day=day,
        tasks=tuple(tasks),
        employee_code=employee_id.strip(),
    )
    return Submission(
        transition=Transition(
            task_write=write,
            log_touch=LogTouch(employee_name=name, task_date=today_label(now)),
        ),
        employee_id=employee_id.strip(),
        project_name=project_name.strip(),
    )
