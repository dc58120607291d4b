# app/routers/task.py
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.models import Employee, Task, TaskStatus, User, transition
from app.schemas.base import MAX_ID
from app.schemas.task import TaskCreate, TaskOut, TaskUpdate, TaskWithEmployee
from app.utils.access import AccessManager
from app.utils.auth import get_current_user, get_optional_user, require_admin
from app.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])

# Query-string value the web client uses for "no filter"
ALL = "all"

# ids past the database integer range are rejected with a 400
TaskId = Annotated[int, Path(ge=-MAX_ID, le=MAX_ID)]


def parse_status_filter(value: Optional[str]) -> Optional[TaskStatus]:
    if not value or value == ALL:
        return None
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value}")


def parse_employee_filter(value: Optional[str]) -> Optional[int]:
    if not value or value == ALL:
        return None
    try:
        employee_id = int(value)
    except ValueError:
        raise ValidationError(f"Invalid employee ID: {value}")
    if abs(employee_id) > MAX_ID:
        raise ValidationError(f"Invalid employee ID: {value}")
    return employee_id


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def _ensure_employee_exists(db: Session, employee_id: int):
    if not db.query(Employee.id).filter(Employee.id == employee_id).first():
        raise ValidationError("Invalid employee ID")


@router.get("", response_model=List[TaskWithEmployee])
def get_all_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    employee_filter: Optional[str] = Query(None, alias="employeeId"),
    limit: Optional[int] = Query(None, ge=0, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List tasks newest first.

    Regular users only ever see their own employee's tasks. Admins see all of
    them and may narrow by employee. Anonymous callers get the full list.
    """
    access = AccessManager(current_user)
    task_status = parse_status_filter(status_filter)
    employee_id = parse_employee_filter(employee_filter)

    try:
        query = access.restrict_tasks(db.query(Task).options(joinedload(Task.employee)))

        # Only admins can filter by employee
        if access.is_admin and employee_id is not None:
            query = query.filter(Task.employee_id == employee_id)

        if task_status is not None:
            query = query.filter(Task.status == task_status)

        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        if limit:
            query = query.limit(limit)

        return query.all()
    except SQLAlchemyError as e:
        logger.error("Get tasks error: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.get("/{task_id}", response_model=TaskWithEmployee)
def get_task(task_id: TaskId, db: Session = Depends(get_db)):
    return _get_task_or_404(db, task_id)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    _ensure_employee_exists(db, payload.employee_id)

    task = Task(
        title=payload.title,
        description=payload.description,
        status=payload.status,
        employee_id=payload.employee_id,
        due_date=payload.due_date,
    )
    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Create task error: %s", e)
        raise ValidationError("Failed to create task")

    logger.info("Task %s created by %s for employee %s", task.id, current_user.username, task.employee_id)
    return task


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: TaskId,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Admins may change any field; the owning employee's account may change only the status."""
    task = _get_task_or_404(db, task_id)

    access = AccessManager(current_user)
    access.ensure_can_update_task(task)

    update_data = payload.model_dump(exclude_unset=True)

    if not access.is_admin:
        if update_data.get("status"):
            task.status = transition(task.status, update_data["status"])
    else:
        new_employee_id = update_data.get("employee_id")
        if new_employee_id is not None and new_employee_id != task.employee_id:
            _ensure_employee_exists(db, new_employee_id)
            task.employee_id = new_employee_id

        if update_data.get("title"):
            task.title = update_data["title"]
        if "description" in update_data:
            task.description = update_data["description"]
        if update_data.get("status"):
            task.status = transition(task.status, update_data["status"])
        if "due_date" in update_data:
            task.due_date = update_data["due_date"]

    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Update task error: %s", e)
        raise ValidationError("Failed to update task")

    return task


@router.delete("/{task_id}")
def delete_task(
    task_id: TaskId,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    task = _get_task_or_404(db, task_id)

    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete task error: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete task")

    logger.info("Task %s deleted by %s", task_id, current_user.username)
    return {"message": "Task deleted successfully"}
