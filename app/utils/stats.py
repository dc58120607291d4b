# app/utils/stats.py
from collections import Counter
from typing import Iterable, List

from app.models.task import TaskStatus

STATUS_ORDER = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)


def completion_rate(completed: int, total: int) -> float:
    if total <= 0:
        return 0
    return completed / total * 100


def tasks_by_employee(all_tasks: Iterable, employees: Iterable) -> List[dict]:
    """Per-employee task counts, busiest first; employees without tasks are left out."""
    counts = Counter(task.employee_id for task in all_tasks)
    breakdown = [
        {"employee_id": employee.id, "employee_name": employee.name, "task_count": counts[employee.id]}
        for employee in employees
        if counts[employee.id] > 0
    ]
    breakdown.sort(key=lambda row: (-row["task_count"], row["employee_name"]))
    return breakdown


def compute_dashboard_stats(visible_tasks: List, employees: List, all_tasks: List = None) -> dict:
    """Summarise the visible tasks.

    ``all_tasks`` is only passed for callers allowed to see the per-employee
    breakdown; when it is None the breakdown is empty.
    """
    status_counts = Counter(TaskStatus(task.status) for task in visible_tasks)
    total = len(visible_tasks)
    completed = status_counts[TaskStatus.COMPLETED]

    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "pending_tasks": status_counts[TaskStatus.PENDING],
        "in_progress_tasks": status_counts[TaskStatus.IN_PROGRESS],
        "completion_rate": completion_rate(completed, total),
        "total_employees": len(employees),
        "tasks_by_status": [{"status": status, "count": status_counts[status]} for status in STATUS_ORDER],
        "tasks_by_employee": tasks_by_employee(all_tasks, employees) if all_tasks is not None else [],
    }
