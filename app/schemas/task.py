# app/schemas/task.py
from pydantic import Field, field_validator
from datetime import date, datetime
from typing import Optional

from app.models.task import TaskStatus
from app.schemas.base import MAX_ID, CamelModel
from app.schemas.employee import EmployeeBasic


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _blank_to_none(v):
    # the web client sends "" for a cleared date input
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TaskCreate(CamelModel):
    title: str = Field(min_length=3)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    employee_id: int = Field(ge=-MAX_ID, le=MAX_ID)
    due_date: Optional[date] = None

    strip_text = field_validator("title", "description", mode="before")(_strip)
    clear_date = field_validator("due_date", mode="before")(_blank_to_none)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or TaskStatus.PENDING


class TaskUpdate(CamelModel):
    """Partial update; only fields present in the request body are applied."""

    title: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    employee_id: Optional[int] = Field(default=None, ge=-MAX_ID, le=MAX_ID)
    due_date: Optional[date] = None

    strip_text = field_validator("title", "description", mode="before")(_strip)
    clear_date = field_validator("due_date", mode="before")(_blank_to_none)


class TaskOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    employee_id: int
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class TaskWithEmployee(TaskOut):
    employee: Optional[EmployeeBasic] = None
