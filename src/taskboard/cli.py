"""Taskboard CLI - daily team task status."""

import asyncio
import json
import logging
import sys

import click

from .adapters.http_api import TaskboardAPI
from .config import load_config
from .core.days import is_mutable, today_label
from .core.errors import TaskboardError
from .core.models import DayRecord, MergedEmployeeView, TaskBucket
from .core.reconcile import find_employee
from .core.transitions import plan_transition
from .workflows import (
    DashboardState,
    choose_bucket,
    find_task,
    load_today,
    refresh_state,
    save_selection,
    select_task,
    submit_day,
)

BUCKET_CHOICE = click.Choice([b.value for b in TaskBucket], case_sensitive=False)
BUCKET_MARKERS = {TaskBucket.TODO: "[ ]", TaskBucket.PENDING: "[~]", TaskBucket.COMPLETE: "[x]"}


@click.group()
@click.version_option(package_name="taskboard")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """Taskboard - daily team task status."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    if ctx.obj is None:
        ctx.obj = TaskboardAPI(load_config())


def _fail(message) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _format_time(value) -> str:
    return value.strftime("%H:%M") if value else ""


def _serialize_view(view: MergedEmployeeView) -> dict:
    return {
        "employee_name": view.employee_name,
        "group": view.group.value,
        "employee_id": view.employee_id,
        "project_name": view.project_name,
        "history": [
            {
                **day.to_api(),
                "editable": is_mutable(day.date),
                "created_at": _log_time(view, day, "created_at"),
                "updated_at": _log_time(view, day, "updated_at"),
            }
            for day in view.history
        ],
    }


def _log_time(view: MergedEmployeeView, day: DayRecord, attr: str) -> str | None:
    log = view.log_for(day.date)
    value = getattr(log, attr) if log else None
    return value.isoformat() if value else None


def _show_day(view: MergedEmployeeView, day: DayRecord, today: str) -> None:
    marker = "TODAY" if day.date == today else "locked"
    click.echo(f"  ### {day.date} ({marker})")
    log = view.log_for(day.date)
    if log:
        click.echo(f"      Cr: {_format_time(log.created_at)}  Mod: {_format_time(log.updated_at)}")
    if day.is_empty:
        click.echo("      No tasks")
        return
    for bucket in TaskBucket:
        for task in day.bucket(bucket):
            click.echo(f"      {BUCKET_MARKERS[bucket]} {task}")


def _show_records(record: DayRecord, heading: str) -> None:
    click.echo(heading)
    for bucket in TaskBucket:
        for task in record.bucket(bucket):
            click.echo(f"  {BUCKET_MARKERS[bucket]} {task}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--employee", default=None, help="Only show one employee")
@click.pass_obj
def dashboard(api: TaskboardAPI, as_json: bool, employee: str | None):
    """Show every employee's recent days."""
    state = asyncio.run(refresh_state(DashboardState(), api, api))
    if state.error:
        _fail(state.error)

    views = list(state.employees)
    if employee:
        view = find_employee(views, employee)
        views = [view] if view else []

    if as_json:
        click.echo(json.dumps([_serialize_view(v) for v in views], indent=2))
        return

    if not views:
        click.echo("No employees found.")
        return

    today = today_label()
    for view in views:
        click.echo(f"{view.employee_name} [{view.group.value}]  ID: {view.employee_id}  Project: {view.project_name}")
        for day in view.history:
            _show_day(view, day, today)
        click.echo()


@main.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def today(api: TaskboardAPI, name: str, as_json: bool):
    """Show an employee's tasks for today."""
    label = today_label()
    try:
        record = asyncio.run(load_today(api, name))
    except TaskboardError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(record.to_api() if record else None, indent=2))
        return

    if record is None or record.is_empty:
        click.echo(f"No tasks found for today ({label}).")
        return
    _show_records(record, f"{name} - {label}")


@main.command()
@click.argument("name")
@click.argument("task")
@click.option("--to", "to_bucket", required=True, type=BUCKET_CHOICE, help="Target status")
@click.option("--day", default=None, help="Day label, defaults to today")
@click.option("--dry-run", is_flag=True, help="Show the result without writing")
@click.pass_obj
def move(api: TaskboardAPI, name: str, task: str, to_bucket: str, day: str | None, dry_run: bool):
    """Move a task to another status on today's record."""
    day = day or today_label()
    target = TaskBucket.parse(to_bucket)

    state = asyncio.run(refresh_state(DashboardState(), api, api))
    if state.error:
        _fail(state.error)

    view = find_employee(list(state.employees), name)
    current = find_task(view, day, task) if view else None
    if current is None:
        _fail(f"Task {task!r} not found for {name} on {day}")

    if dry_run:
        try:
            transition = plan_transition(view.employee_name, view.group, task, current, target, day)
        except TaskboardError as e:
            _fail(e)
        _show_records(transition.task_write.apply(view.day(day)), f"{view.employee_name} - {day} (dry run)")
        return

    state = select_task(state, view.employee_name, view.group, day, task, current)
    if state.selection is None:
        _fail(f"{day} is locked; only today ({today_label()}) can be edited")
    state = choose_bucket(state, target)

    try:
        state = asyncio.run(save_selection(state, api, api))
    except TaskboardError as e:
        _fail(e)

    click.echo(f"✓ {task} → {target.value}")
    if state.error:
        click.echo(f"Warning: saved, but refresh failed: {state.error}", err=True)


@main.command()
@click.argument("name")
@click.option("--todo", multiple=True, help="Task still to do (repeatable)")
@click.option("--pending", multiple=True, help="Task in progress (repeatable)")
@click.option("--complete", multiple=True, help="Task completed (repeatable)")
@click.option("--employee-id", default="", help="Employee code")
@click.option("--project", default="", help="Project name")
@click.option("--group", default=None, help="DEV or Managers (default from config)")
@click.pass_obj
def submit(
    api: TaskboardAPI,
    name: str,
    todo: tuple[str, ...],
    pending: tuple[str, ...],
    complete: tuple[str, ...],
    employee_id: str,
    project: str,
    group: str | None,
):
    """Submit today's task set for an employee."""
    try:
        asyncio.run(
            submit_day(
                api,
                api,
                name,
                group or api.config.default_group,
                todo=list(todo),
                pending=list(pending),
                complete=list(complete),
                employee_id=employee_id,
                project_name=project,
            )
        )
    except TaskboardError as e:
        _fail(e)

    click.echo(f"✓ Tasks & logs synced for {name} ({today_label()})")


if __name__ == "__main__":
    main()
