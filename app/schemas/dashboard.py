from typing import List

from app.models.task import TaskStatus
from app.schemas.base import CamelModel


class StatusCount(CamelModel):
    status: TaskStatus
    count: int


class EmployeeTaskCount(CamelModel):
    employee_id: int
    employee_name: str
    task_count: int


class DashboardStats(CamelModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    completion_rate: float
    total_employees: int
    tasks_by_status: List[StatusCount]
    tasks_by_employee: List[EmployeeTaskCount]
