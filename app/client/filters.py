# app/client/filters.py
# Search and filter helpers applied to lists already fetched from the API
from typing import List, Optional

ALL = "all"


def _contains(value: Optional[str], query: str) -> bool:
    return bool(value) and query in value.lower()


def search_tasks(tasks: List[dict], query: str = "", status: str = ALL, employee_id=ALL) -> List[dict]:
    """Tasks whose title or description contains ``query`` (case-insensitive),
    narrowed by status and assignee. ``"all"`` disables a filter."""
    needle = (query or "").lower()
    matches = []
    for task in tasks:
        matches_search = not needle or _contains(task.get("title"), needle) or _contains(task.get("description"), needle)
        matches_status = status == ALL or task.get("status") == status
        matches_employee = employee_id == ALL or str(task.get("employeeId")) == str(employee_id)
        if matches_search and matches_status and matches_employee:
            matches.append(task)
    return matches


def search_employees(employees: List[dict], query: str = "") -> List[dict]:
    needle = (query or "").lower()
    if not needle:
        return list(employees)
    return [
        employee for employee in employees
        if any(_contains(employee.get(field), needle) for field in ("name", "email", "role"))
    ]


def count_tasks_for_employee(tasks: List[dict], employee_id) -> int:
    return sum(1 for task in tasks if str(task.get("employeeId")) == str(employee_id))
