import pytest

from app.client import ApiError, TaskTrackerClient, count_tasks_for_employee, search_employees, search_tasks


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers=None, json=None, params=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "json": json, "params": params})
        return self.responses.pop(0)


def test_login_stores_token_and_sends_bearer_header():
    session = FakeSession(
        FakeResponse(payload={"user": {"id": 1, "role": "admin"}, "token": "abc"}),
        FakeResponse(payload={"id": 1, "role": "admin"}),
    )
    client = TaskTrackerClient("http://api.local/", session=session)

    client.login("admin@co.com", "secret123")
    client.me()

    assert client.token == "abc"
    assert client.is_admin
    assert session.calls[0]["url"] == "http://api.local/api/auth/login"
    assert "Authorization" not in session.calls[0]["headers"]
    assert session.calls[1]["headers"]["Authorization"] == "Bearer abc"


def test_error_message_is_surfaced_verbatim():
    session = FakeSession(FakeResponse(403, payload={"message": "You can only update your own tasks"}, reason="Forbidden"))
    client = TaskTrackerClient("http://api.local", token="t", session=session)

    with pytest.raises(ApiError) as excinfo:
        client.update_task_status(5, "Completed")
    assert excinfo.value.status_code == 403
    assert excinfo.value.message == "You can only update your own tasks"


def test_error_falls_back_to_text_then_reason():
    session = FakeSession(
        FakeResponse(502, payload=None, text="Bad gateway upstream", reason="Bad Gateway"),
        FakeResponse(500, payload={"detail": "x"}, reason="Internal Server Error"),
    )
    client = TaskTrackerClient("http://api.local", session=session)

    with pytest.raises(ApiError, match="Bad gateway upstream"):
        client.list_employees()
    with pytest.raises(ApiError, match="Internal Server Error"):
        client.list_employees()


def test_lists_are_cached_until_a_mutation():
    employees = [{"id": 1, "name": "Ana"}]
    session = FakeSession(
        FakeResponse(payload=employees),
        FakeResponse(payload={"id": 2, "name": "Ben"}, reason="Created"),
        FakeResponse(payload=employees + [{"id": 2, "name": "Ben"}]),
    )
    client = TaskTrackerClient("http://api.local", token="t", session=session)

    assert client.list_employees() == employees
    assert client.list_employees() == employees
    assert len(session.calls) == 1

    client.create_employee("Ben", "Designer", "ben@co.com")
    assert len(client.list_employees()) == 2
    assert len(session.calls) == 3


def test_failed_mutation_still_invalidates_cache():
    session = FakeSession(
        FakeResponse(payload=[]),
        FakeResponse(400, payload={"message": "Invalid employee ID"}),
        FakeResponse(payload=[]),
    )
    client = TaskTrackerClient("http://api.local", token="t", session=session)

    client.list_tasks()
    with pytest.raises(ApiError):
        client.create_task("Set up CI", employee_id=99)
    client.list_tasks()
    assert [c["method"] for c in session.calls] == ["GET", "POST", "GET"]


def test_list_tasks_query_params():
    session = FakeSession(FakeResponse(payload=[]), FakeResponse(payload=[]))
    client = TaskTrackerClient("http://api.local", session=session)

    client.list_tasks()
    client.list_tasks(status="Completed", employee_id=3, limit=5)

    assert session.calls[0]["params"] is None
    assert session.calls[1]["params"] == {"status": "Completed", "employeeId": 3, "limit": 5}


def test_create_task_payload_uses_wire_names():
    session = FakeSession(FakeResponse(payload={"id": 1}))
    client = TaskTrackerClient("http://api.local", token="t", session=session)

    client.create_task("Set up CI", employee_id=4, due_date="2025-03-01")
    assert session.calls[0]["json"] == {"title": "Set up CI", "employeeId": 4, "dueDate": "2025-03-01"}


TASKS = [
    {"id": 1, "title": "Set up CI", "description": "GitHub Actions", "status": "Pending", "employeeId": 1},
    {"id": 2, "title": "Write docs", "description": None, "status": "Completed", "employeeId": 2},
    {"id": 3, "title": "Fix login bug", "description": "ci flake too", "status": "In Progress", "employeeId": 1},
]


def test_search_tasks():
    assert [t["id"] for t in search_tasks(TASKS, "ci")] == [1, 3]
    assert [t["id"] for t in search_tasks(TASKS, "", status="Completed")] == [2]
    assert [t["id"] for t in search_tasks(TASKS, "", employee_id="1")] == [1, 3]
    assert [t["id"] for t in search_tasks(TASKS, "DOCS", employee_id=2)] == [2]
    assert search_tasks(TASKS, "nothing matches") == []


def test_search_employees_and_counts():
    employees = [
        {"id": 1, "name": "Ana Lee", "email": "ana@co.com", "role": "Engineer"},
        {"id": 2, "name": "Ben Ortiz", "email": "ben@co.com", "role": "Designer"},
    ]
    assert [e["id"] for e in search_employees(employees, "design")] == [2]
    assert [e["id"] for e in search_employees(employees, "ANA@")] == [1]
    assert len(search_employees(employees, "")) == 2
    assert count_tasks_for_employee(TASKS, 1) == 2
    assert count_tasks_for_employee(TASKS, "2") == 1
