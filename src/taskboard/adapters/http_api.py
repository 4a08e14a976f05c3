"""Taskboard backend adapter - HTTP/JSON client for sheets, metadata and logs."""

import logging
from typing import Callable, TypeVar
from urllib.parse import quote

import requests

from taskboard.config import Config, load_config
from taskboard.core.models import DailyLog, EmployeeHistory, EmployeeMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackendError(Exception):
    """Raised when a backend call fails: transport error, non-2xx or bad JSON."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TaskboardAPI:
    """
    Taskboard backend adapter.

    Implements the TaskSheet and RecordStore protocols. Maps HTTP failures to
    BackendError. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _request(self, method: str, endpoint: str, payload: dict | None = None) -> requests.Response:
        url = f"{self.config.backend_url}{endpoint}"
        logger.debug(f"{method} {url}")
        try:
            resp = self._session.request(
                method,
                url,
                json=payload,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise BackendError(f"{method} {endpoint} failed: {e}") from e

        if not resp.ok:
            body = resp.text.strip()
            logger.error(f"{method} {endpoint} returned {resp.status_code}: {body}")
            raise BackendError(
                body or f"{method} {endpoint} returned {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        return resp

    def _get_json(self, endpoint: str) -> dict | list:
        resp = self._request("GET", endpoint)
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f"GET {endpoint} returned invalid JSON: {e}", resp.status_code) from e

    def _get_list(self, endpoint: str) -> list[dict]:
        data = self._get_json(endpoint)
        # Go encodes an empty slice as null
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendError(f"GET {endpoint} returned {type(data).__name__}, expected a list")
        for row in data:
            if not isinstance(row, dict):
                raise BackendError(f"GET {endpoint} returned a {type(row).__name__} row, expected an object")
        return data

    def _decode(self, endpoint: str, decode: Callable[[dict], T], data: dict) -> T:
        """Decode one row; shape errors in nested fields become BackendError."""
        try:
            return decode(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"GET {endpoint} returned a malformed row: {e}")
            raise BackendError(f"GET {endpoint} returned a malformed row: {e}") from e

    # TaskSheet

    def fetch_histories(self) -> list[EmployeeHistory]:
        """Fetch every employee's history from all sheets."""
        endpoint = "/employees/tasks"
        return [self._decode(endpoint, EmployeeHistory.from_api, d) for d in self._get_list(endpoint)]

    def fetch_history(self, employee_name: str) -> EmployeeHistory:
        """Fetch one employee's history."""
        endpoint = f"/employee/{quote(employee_name, safe='')}/tasks"
        data = self._get_json(endpoint)
        if not isinstance(data, dict):
            raise BackendError(f"Unexpected history payload for {employee_name!r}")
        return self._decode(endpoint, EmployeeHistory.from_api, data)

    def write_tasks(self, payload: dict) -> None:
        """Write task statuses for one employee-day."""
        self._request("POST", "/task", payload)

    # RecordStore

    def fetch_metadata(self) -> list[EmployeeMetadata]:
        return [self._decode("/metadata", EmployeeMetadata.from_api, d) for d in self._get_list("/metadata")]

    def upsert_metadata(self, payload: dict) -> None:
        self._request("POST", "/metadata", payload)

    def fetch_logs(self) -> list[DailyLog]:
        return [self._decode("/logs", DailyLog.from_api, d) for d in self._get_list("/logs")]

    def touch_log(self, payload: dict) -> None:
        self._request("POST", "/logs", payload)
