"""Shared fixtures: an in-memory backend implementing both ports."""

import copy
from datetime import datetime

import pytest

from taskboard.adapters.http_api import BackendError
from taskboard.config import Config
from taskboard.core.models import (
    DailyLog,
    DayRecord,
    EmployeeHistory,
    EmployeeMetadata,
    Group,
    TaskBucket,
    canonical_name,
)

WRITTEN_AT = datetime(2025, 1, 14, 10, 0)


class FakeBackend:
    """
    In-memory stand-in for the HTTP backend.

    Implements TaskSheet and RecordStore. Method names listed in `fail`
    raise BackendError. Every call is recorded in `calls`.
    """

    def __init__(self, histories=None, metadata=None, logs=None):
        self.histories: list[EmployeeHistory] = histories or []
        self.metadata: list[EmployeeMetadata] = metadata or []
        self.logs: list[DailyLog] = logs or []
        self.fail: set[str] = set()
        self.calls: list[tuple[str, object]] = []
        self.config = Config()

    def _record(self, name: str, payload=None) -> None:
        if name in self.fail:
            raise BackendError(f"{name} failed", status_code=500, body=f"{name} failed")
        self.calls.append((name, payload))

    def writes(self) -> list[str]:
        return [name for name, _ in self.calls if not name.startswith("fetch")]

    # TaskSheet

    def fetch_histories(self):
        self._record("fetch_histories")
        return copy.deepcopy(self.histories)

    def fetch_history(self, employee_name):
        self._record("fetch_history", employee_name)
        for emp in self.histories:
            if canonical_name(emp.employee_name) == canonical_name(employee_name):
                return copy.deepcopy(emp)
        raise BackendError(f"employee '{employee_name}' not found", status_code=500)

    def write_tasks(self, payload):
        self._record("write_tasks", payload)
        group = Group.parse(payload.get("role"))
        emp = next(
            (
                e
                for e in self.histories
                if canonical_name(e.employee_name) == canonical_name(payload["employee_name"])
                and e.group == group
            ),
            None,
        )
        if emp is None:
            emp = EmployeeHistory(employee_name=payload["employee_name"], group=group)
            self.histories.append(emp)
        day = next((d for d in emp.history if d.date == payload["date"]), None)
        if day is None:
            day = DayRecord(date=payload["date"])
            emp.history.append(day)
        for item in payload["tasks"]:
            text, target = item["task"], TaskBucket(item["status"])
            found = day.match(text)
            if found is None:
                day.bucket(target).append(text)
            elif found[0] != target:
                day.bucket(found[0]).remove(found[1])
                day.bucket(target).append(found[1])

    # RecordStore

    def fetch_metadata(self):
        self._record("fetch_metadata")
        return copy.deepcopy(self.metadata)

    def upsert_metadata(self, payload):
        self._record("upsert_metadata", payload)

    def fetch_logs(self):
        self._record("fetch_logs")
        return copy.deepcopy(self.logs)

    def touch_log(self, payload):
        self._record("touch_log", payload)
        for log in self.logs:
            if (
                canonical_name(log.employee_name) == canonical_name(payload["employee_name"])
                and log.task_date == payload["task_date"]
            ):
                log.updated_at = WRITTEN_AT
                return
        self.logs.append(
            DailyLog(
                employee_name=payload["employee_name"],
                task_date=payload["task_date"],
                created_at=WRITTEN_AT,
                updated_at=WRITTEN_AT,
            )
        )


@pytest.fixture
def now():
    """Tuesday 14 January 2025, mid-morning."""
    return datetime(2025, 1, 14, 9, 30)


@pytest.fixture
def alice():
    return EmployeeHistory(
        employee_name="Alice",
        group=Group.DEV,
        history=[
            DayRecord(date="Tue 14-Jan", todo=["Write spec"]),
            DayRecord(date="Mon 13-Jan", todo=["Plan sprint"], complete=["Review PR"]),
        ],
    )


@pytest.fixture
def backend(alice):
    return FakeBackend(
        histories=[
            alice,
            EmployeeHistory(
                employee_name="Bob",
                group=Group.MANAGERS,
                history=[DayRecord(date="Tue 14-Jan", pending=["Budget"])],
            ),
        ],
        metadata=[EmployeeMetadata(employee_id="E1", employee_name="alice", project_name="Apollo")],
        logs=[
            DailyLog(
                employee_name="ALICE",
                task_date="Mon 13-Jan",
                created_at=datetime(2025, 1, 13, 9, 0),
                updated_at=datetime(2025, 1, 13, 17, 0),
            )
        ],
    )


@pytest.fixture
def make_backend():
    return FakeBackend
