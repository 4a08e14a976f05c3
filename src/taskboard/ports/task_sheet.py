"""Task sheet interface - the system of record for task histories."""

from typing import Protocol

from taskboard.core.models import EmployeeHistory


class TaskSheet(Protocol):
    """Interface for reading and writing employee task histories."""

    def fetch_histories(self) -> list[EmployeeHistory]:
        """Fetch every employee's history."""
        ...

    def fetch_history(self, employee_name: str) -> EmployeeHistory:
        """Fetch one employee's history."""
        ...

    def write_tasks(self, payload: dict) -> None:
        """Write task statuses for one employee-day."""
        ...
