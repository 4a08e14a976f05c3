"""Record store interface - employee metadata and daily logs."""

from typing import Protocol

from taskboard.core.models import DailyLog, EmployeeMetadata


class RecordStore(Protocol):
    """Interface for the auxiliary metadata and log store."""

    def fetch_metadata(self) -> list[EmployeeMetadata]:
        """Fetch all employee metadata rows."""
        ...

    def upsert_metadata(self, payload: dict) -> None:
        """Create or update one employee's metadata."""
        ...

    def fetch_logs(self) -> list[DailyLog]:
        """Fetch all daily log rows."""
        ...

    def touch_log(self, payload: dict) -> None:
        """Create the (employee, day) log row or refresh its updated_at."""
        ...
