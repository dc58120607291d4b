"""
HTTP client for the task tracker API.

Mirrors what the browser client does: keeps the bearer token, surfaces the
server's ``message`` verbatim on failure, and caches the employee and task
lists until the next mutation.
"""

import os
from typing import Any, Dict, List, Optional

import requests

DEFAULT_API_URL = "http://localhost:5000"


class ApiError(Exception):
    """A non-2xx response; ``message`` is what the server said."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: requests.Response) -> str:
    message = response.reason or f"HTTP {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        text = response.text
        return text if text else message
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return message


class TaskTrackerClient:
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv("TASK_TRACKER_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.token = token
        self.user: Optional[dict] = None
        self.session = session or requests.Session()
        self._cache: Dict[str, Any] = {}

    # ---- transport ------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, json: Optional[dict] = None, params: Optional[dict] = None):
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            json=json,
            params=params,
        )
        if not response.ok:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    def invalidate(self):
        """Drop cached lists so the next read refetches them."""
        self._cache.clear()

    def _mutate(self, method: str, path: str, json: Optional[dict] = None):
        try:
            return self._request(method, path, json=json)
        finally:
            self.invalidate()

    # ---- auth -----------------------------------------------------------

    def _store_session(self, data: dict) -> dict:
        self.token = data["token"]
        self.user = data["user"]
        self.invalidate()
        return data["user"]

    def register(self, username: str, email: str, password: str, role: Optional[str] = None) -> dict:
        payload = {"username": username, "email": email, "password": password}
        if role:
            payload["role"] = role
        return self._store_session(self._request("POST", "/api/auth/register", json=payload))

    def login(self, email: str, password: str) -> dict:
        return self._store_session(self._request("POST", "/api/auth/login", json={"email": email, "password": password}))

    def logout(self):
        self.token = None
        self.user = None
        self.invalidate()

    def me(self) -> dict:
        self.user = self._request("GET", "/api/auth/me")
        return self.user

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"

    # ---- employees ------------------------------------------------------

    def list_employees(self, refresh: bool = False) -> List[dict]:
        if refresh or "employees" not in self._cache:
            self._cache["employees"] = self._request("GET", "/api/employees")
        return self._cache["employees"]

    def get_employee(self, employee_id: int) -> dict:
        return self._request("GET", f"/api/employees/{employee_id}")

    def create_employee(self, name: str, role: str, email: str) -> dict:
        return self._mutate("POST", "/api/employees", json={"name": name, "role": role, "email": email})

    def update_employee(self, employee_id: int, **fields) -> dict:
        return self._mutate("PUT", f"/api/employees/{employee_id}", json=fields)

    def delete_employee(self, employee_id: int) -> dict:
        return self._mutate("DELETE", f"/api/employees/{employee_id}")

    # ---- tasks ----------------------------------------------------------

    def list_tasks(self, status: str = "all", employee_id="all", limit: Optional[int] = None, refresh: bool = False) -> List[dict]:
        params = {}
        if status and status != "all":
            params["status"] = status
        if employee_id not in (None, "all"):
            params["employeeId"] = employee_id
        if limit:
            params["limit"] = limit

        key = ("tasks", tuple(sorted(params.items())))
        if refresh or key not in self._cache:
            self._cache[key] = self._request("GET", "/api/tasks", params=params or None)
        return self._cache[key]

    def get_task(self, task_id: int) -> dict:
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, title: str, employee_id: int, description: Optional[str] = None,
                    status: Optional[str] = None, due_date: Optional[str] = None) -> dict:
        payload = {"title": title, "employeeId": employee_id}
        if description is not None:
            payload["description"] = description
        if status:
            payload["status"] = status
        if due_date:
            payload["dueDate"] = due_date
        return self._mutate("POST", "/api/tasks", json=payload)

    def update_task(self, task_id: int, **fields) -> dict:
        """Fields use the wire names (``status``, ``employeeId``, ``dueDate``, ...)."""
        return self._mutate("PUT", f"/api/tasks/{task_id}", json=fields)

    def update_task_status(self, task_id: int, status: str) -> dict:
        return self.update_task(task_id, status=status)

    def delete_task(self, task_id: int) -> dict:
        return self._mutate("DELETE", f"/api/tasks/{task_id}")

    # ---- dashboard ------------------------------------------------------

    def dashboard(self) -> dict:
        return self._request("GET", "/api/dashboard")
