"""Tests for the HTTP backend adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from taskboard.adapters.http_api import BackendError, TaskboardAPI
from taskboard.config import Config
from taskboard.core.models import Group


def _response(status=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    if isinstance(json_data, Exception):
        resp.json.side_effect = json_data
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def api(session):
    return TaskboardAPI(Config(backend_url="http://backend:8080", request_timeout=5), session=session)


class TestFetch:
    def test_fetch_histories(self, api, session):
        session.request.return_value = _response(
            json_data=[
                {
                    "employee_name": "Alice",
                    "sheet_name": "DEV",
                    "history": [{"date": "Tue 14-Jan", "todo": ["Write spec"], "pending": [], "complete": []}],
                },
                {"employee_name": "Bob", "sheet_name": "Managers", "history": []},
            ]
        )

        histories = api.fetch_histories()

        session.request.assert_called_once_with(
            "GET", "http://backend:8080/employees/tasks", json=None, timeout=5
        )
        assert [h.employee_name for h in histories] == ["Alice", "Bob"]
        assert histories[1].group is Group.MANAGERS
        assert histories[0].history[0].todo == ["Write spec"]

    def test_null_list_is_empty(self, api, session):
        session.request.return_value = _response(json_data=None)
        assert api.fetch_logs() == []

    def test_fetch_history_encodes_name(self, api, session):
        session.request.return_value = _response(json_data={"employee_name": "Ann Lee", "history": []})
        history = api.fetch_history("Ann Lee/QA")
        url = session.request.call_args[0][1]
        assert url == "http://backend:8080/employee/Ann%20Lee%2FQA/tasks"
        assert history.employee_name == "Ann Lee"

    def test_fetch_metadata(self, api, session):
        session.request.return_value = _response(
            json_data=[{"id": "2", "employee_id": "E1", "employee_name": "Alice", "project_name": "Apollo"}]
        )
        [meta] = api.fetch_metadata()
        assert meta.employee_id == "E1"
        assert meta.project_name == "Apollo"

    def test_fetch_logs(self, api, session):
        session.request.return_value = _response(
            json_data=[
                {
                    "employee_name": "Alice",
                    "task_date": "Tue 14-Jan",
                    "created_at": "2025-01-14T09:00:00Z",
                    "updated_at": "2025-01-14T10:00:00Z",
                }
            ]
        )
        [log] = api.fetch_logs()
        assert log.task_date == "Tue 14-Jan"
        assert log.updated_at.hour == 10


class TestWrite:
    def test_write_tasks_posts_payload(self, api, session):
        session.request.return_value = _response(text="Tasks updated successfully")
        payload = {"employee_name": "Alice", "tasks": [{"task": "A", "status": "todo"}]}

        api.write_tasks(payload)

        session.request.assert_called_once_with("POST", "http://backend:8080/task", json=payload, timeout=5)

    def test_touch_log(self, api, session):
        session.request.return_value = _response()
        api.touch_log({"employee_name": "Alice", "task_date": "Tue 14-Jan"})
        assert session.request.call_args[0][:2] == ("POST", "http://backend:8080/logs")

    def test_upsert_metadata(self, api, session):
        session.request.return_value = _response()
        api.upsert_metadata({"employee_id": "E1", "employee_name": "Alice", "project_name": "Apollo"})
        assert session.request.call_args[0][:2] == ("POST", "http://backend:8080/metadata")


class TestErrors:
    def test_non_2xx_raises_with_body(self, api, session):
        session.request.return_value = _response(status=500, text="Failed to update task: sheet 'QA' not found\n")

        with pytest.raises(BackendError) as exc:
            api.write_tasks({"employee_name": "Alice", "tasks": []})

        assert exc.value.status_code == 500
        assert str(exc.value) == "Failed to update task: sheet 'QA' not found"

    def test_empty_error_body(self, api, session):
        session.request.return_value = _response(status=404, text="")
        with pytest.raises(BackendError, match="returned 404"):
            api.fetch_metadata()

    def test_transport_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(BackendError, match="refused"):
            api.fetch_histories()

    def test_invalid_json(self, api, session):
        session.request.return_value = _response(json_data=ValueError("Expecting value"))
        with pytest.raises(BackendError, match="invalid JSON"):
            api.fetch_histories()

    def test_unexpected_shape(self, api, session):
        session.request.return_value = _response(json_data={"error": "nope"})
        with pytest.raises(BackendError, match="expected a list"):
            api.fetch_logs()

    def test_non_object_row(self, api, session):
        session.request.return_value = _response(json_data=["oops"])
        with pytest.raises(BackendError, match="expected an object"):
            api.fetch_metadata()

    def test_malformed_nested_field(self, api, session):
        session.request.return_value = _response(json_data=[{"employee_name": "Alice", "history": ["x"]}])
        with pytest.raises(BackendError, match="malformed row"):
            api.fetch_histories()

    def test_malformed_single_history(self, api, session):
        session.request.return_value = _response(json_data={"employee_name": "Alice", "history": [{"todo": 5}]})
        with pytest.raises(BackendError, match="malformed row"):
            api.fetch_history("Alice")
