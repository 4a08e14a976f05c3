"""Merge task histories with metadata and daily logs - pure, no I/O."""

from .models import (
    DailyLog,
    EmployeeHistory,
    EmployeeMetadata,
    MergedEmployeeView,
    canonical_name,
)


def index_metadata(metadata: list[EmployeeMetadata]) -> dict[str, EmployeeMetadata]:
    """Map canonical name to metadata. The first row for a name wins."""
    index: dict[str, EmployeeMetadata] = {}
    for row in metadata:
        index.setdefault(canonical_name(row.employee_name), row)
    return index


def group_logs(logs: list[DailyLog]) -> dict[str, list[DailyLog]]:
    """Map canonical name to all of that employee's log rows, in input order."""
    grouped: dict[str, list[DailyLog]] = {}
    for log in logs:
        grouped.setdefault(canonical_name(log.employee_name), []).append(log)
    return grouped


def merge(
    histories: list[EmployeeHistory],
    metadata: list[EmployeeMetadata],
    logs: list[DailyLog],
) -> list[MergedEmployeeView]:
    """
    Join each history with its metadata and logs by case-insensitive name.

    Exactly one view per history, in the same order. Missing metadata or
    logs leave the view's fields empty; they never drop a row. An empty
    collection is indistinguishable from a failed fetch.

    Pure function - no I/O.
    """
    meta_by_name = index_metadata(metadata)
    logs_by_name = group_logs(logs)

    views = []
    for emp in histories:
        key = canonical_name(emp.employee_name)
        views.append(
            MergedEmployeeView(
                employee_name=emp.employee_name,
                group=emp.group,
                history=emp.history,
                metadata=meta_by_name.get(key),
                logs=list(logs_by_name.get(key, [])),
            )
        )
    return views


def find_employee(views: list[MergedEmployeeView], name: str) -> MergedEmployeeView | None:
    """Find a merged view by case-insensitive name."""
    key = canonical_name(name)
    return next((v for v in views if canonical_name(v.employee_name) == key), None)
