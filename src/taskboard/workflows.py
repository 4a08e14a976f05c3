"""Shared workflow layer between the CLI and the backend.

Refresh cycles, task transitions and day submissions. Each operation catches
backend faults at its boundary and converts them to a TaskboardError kind.
Session state is an explicit DashboardState value passed in and returned.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from .adapters.http_api import BackendError
from .core.days import is_mutable, today_label
from .core.errors import AuxiliaryUnavailable, EditRejected, SourceUnavailable, WriteFailed
from .core.models import DayRecord, Group, MergedEmployeeView, TaskBucket
from .core.reconcile import merge
from .core.transitions import Submission, Transition, plan_submission, plan_transition
from .ports import RecordStore, TaskSheet

logger = logging.getLogger(__name__)


# ============== Refresh ==============


async def _fetch_auxiliary(fetch: Callable[[], list], source: str) -> list:
    """Run an auxiliary fetch; a failure degrades to an empty collection."""
    try:
        return await asyncio.to_thread(fetch)
    except BackendError as e:
        logger.warning(str(AuxiliaryUnavailable(source, str(e))))
        return []


async def _fetch_histories(sheets: TaskSheet) -> list:
    try:
        return await asyncio.to_thread(sheets.fetch_histories)
    except BackendError as e:
        raise SourceUnavailable(f"Failed to fetch tasks: {e}") from e


async def refresh(sheets: TaskSheet, records: RecordStore) -> list[MergedEmployeeView]:
    """
    Fetch histories, metadata and logs concurrently and merge them.

    Raises SourceUnavailable if the histories can't be fetched; metadata and
    log failures are logged and treated as empty.
    """
    histories, metadata, logs = await asyncio.gather(
        _fetch_histories(sheets),
        _fetch_auxiliary(records.fetch_metadata, "metadata"),
        _fetch_auxiliary(records.fetch_logs, "logs"),
    )
    return merge(histories, metadata, logs)


async def load_today(
    sheets: TaskSheet,
    employee_name: str,
    now: datetime | None = None,
) -> DayRecord | None:
    """Fetch one employee's history and return today's record, if any."""
    if not employee_name.strip():
        raise EditRejected("Employee name is required")
    try:
        history = await asyncio.to_thread(sheets.fetch_history, employee_name.strip())
    except BackendError as e:
        raise SourceUnavailable(f"Could not fetch tasks for {employee_name}: {e}") from e
    label = today_label(now)
    return next((d for d in history.history if d.date == label), None)


def find_task(view: MergedEmployeeView, day: str, task_text: str) -> TaskBucket | None:
    """Bucket holding `task_text` on `day` in a merged view."""
    record = view.day(day)
    return record.find(task_text) if record else None


# ============== Writes ==============


async def _execute(transition: Transition, sheets: TaskSheet, records: RecordStore) -> None:
    """Issue the task write, then the log touch. No rollback between them."""
    write = transition.task_write
    try:
        await asyncio.to_thread(sheets.write_tasks, write.to_payload())
    except BackendError as e:
        logger.error(f"Task write for {write.employee_name} failed: {e}")
        raise WriteFailed("task", str(e)) from e

    touch = transition.log_touch
    try:
        await asyncio.to_thread(records.touch_log, touch.to_payload())
    except BackendError as e:
        # Task state is already written; the log stays stale until the next save.
        logger.error(f"Log touch for {touch.employee_name} {touch.task_date} failed: {e}")
        raise WriteFailed("log", str(e)) from e


async def move_task(
    sheets: TaskSheet,
    records: RecordStore,
    employee: str,
    group: Group | str,
    task_text: str,
    from_bucket: TaskBucket | str,
    to_bucket: TaskBucket | str,
    day: str,
    now: datetime | None = None,
) -> Transition:
    """Move one task between buckets on today's record."""
    transition = plan_transition(employee, group, task_text, from_bucket, to_bucket, day, now)
    await _execute(transition, sheets, records)
    logger.debug(
        f"Moved {task_text!r} for {employee} from {transition.from_bucket.value} to {transition.to_bucket.value}"
    )
    return transition


async def submit_day(
    sheets: TaskSheet,
    records: RecordStore,
    employee: str,
    group: Group | str,
    todo: list[str] | None = None,
    pending: list[str] | None = None,
    complete: list[str] | None = None,
    employee_id: str = "",
    project_name: str = "",
    now: datetime | None = None,
) -> Submission:
    """
    Write a whole day's task set for today.

    Order: tasks, then metadata, then the daily log. The metadata row is
    upserted on every submission so a first-time employee always gets one.
    """
    submission = plan_submission(
        employee,
        group,
        today_label(now),
        todo=todo,
        pending=pending,
        complete=complete,
        employee_id=employee_id,
        project_name=project_name,
        now=now,
    )
    transition = submission.transition
    try:
        await asyncio.to_thread(sheets.write_tasks, transition.task_write.to_payload())
    except BackendError as e:
        raise WriteFailed("task", str(e)) from e

    try:
        await asyncio.to_thread(records.upsert_metadata, submission.metadata_payload())
    except BackendError as e:
        raise WriteFailed("metadata", str(e)) from e

    try:
        await asyncio.to_thread(records.touch_log, transition.log_touch.to_payload())
    except BackendError as e:
        raise WriteFailed("log", str(e)) from e

    return submission


# ============== Session State ==============


@dataclass(frozen=True)
class EditSelection:
    """A task picked for editing and the bucket it should move to."""

    employee_name: str
    group: Group
    day: str
    task_text: str
    current_bucket: TaskBucket
    target_bucket: TaskBucket


@dataclass(frozen=True)
class DashboardState:
    """Everything one dashboard session holds between refreshes."""

    employees: tuple[MergedEmployeeView, ...] = ()
    error: str | None = None
    selection: EditSelection | None = None


async def refresh_state(state: DashboardState, sheets: TaskSheet, records: RecordStore) -> DashboardState:
    """Refresh the session's view. On failure keep the stale view and set error."""
    try:
        employees = await refresh(sheets, records)
    except SourceUnavailable as e:
        logger.error(str(e))
        return replace(state, error=str(e))
    return replace(state, employees=tuple(employees), error=None)


def select_task(
    state: DashboardState,
    employee_name: str,
    group: Group,
    day: str,
    task_text: str,
    bucket: TaskBucket,
    now: datetime | None = None,
) -> DashboardState:
    """Pick a task to edit. A no-op for locked days."""
    if not is_mutable(day, now):
        return state
    selection = EditSelection(
        employee_name=employee_name,
        group=group,
        day=day,
        task_text=task_text,
        current_bucket=bucket,
        target_bucket=bucket,
    )
    return replace(state, selection=selection)


def choose_bucket(state: DashboardState, bucket: TaskBucket) -> DashboardState:
    if state.selection is None:
        return state
    return replace(state, selection=replace(state.selection, target_bucket=bucket))


def cancel_selection(state: DashboardState) -> DashboardState:
    return replace(state, selection=None)


async def save_selection(
    state: DashboardState,
    sheets: TaskSheet,
    records: RecordStore,
    now: datetime | None = None,
) -> DashboardState:
    """
    Save the selected task's new bucket, then re-fetch everything.

    The view is never patched locally. WriteFailed and EditRejected propagate;
    the caller keeps `state` as the last known good view.
    """
    selection = state.selection
    if selection is None:
        return state

    await move_task(
        sheets,
        records,
        selection.employee_name,
        selection.group,
        selection.task_text,
        selection.current_bucket,
        selection.target_bucket,
        selection.day,
        now,
    )
    saved = replace(state, selection=None)
    return await refresh_state(saved, sheets, records)
