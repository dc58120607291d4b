# app/routers/employee.py
import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Employee, Task, User
from app.schemas.base import MAX_ID
from app.schemas.employee import EmployeeCreate, EmployeeOut, EmployeeUpdate
from app.utils.auth import require_admin
from app.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["Employees"])

EmployeeId = Annotated[int, Path(ge=-MAX_ID, le=MAX_ID)]


def _get_employee_or_404(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


@router.get("", response_model=List[EmployeeOut])
def get_all_employees(db: Session = Depends(get_db)):
    """Get all employees sorted by name (open to any caller)"""
    return db.query(Employee).order_by(Employee.name, Employee.id).all()


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: EmployeeId, db: Session = Depends(get_db)):
    return _get_employee_or_404(db, employee_id)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if db.query(Employee).filter(Employee.email == payload.email).first():
        raise ValidationError("Email already in use")

    employee = Employee(name=payload.name, role=payload.role, email=payload.email)
    try:
        db.add(employee)
        db.commit()
        db.refresh(employee)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Create employee error: %s", e)
        raise ValidationError("Failed to create employee")

    logger.info("Employee %s created by %s", employee.id, current_user.username)
    return employee


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: EmployeeId,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    employee = _get_employee_or_404(db, employee_id)

    # Check if email is being changed to an existing email
    if payload.email and payload.email != employee.email:
        clash = db.query(Employee).filter(
            Employee.email == payload.email,
            Employee.id != employee.id,
        ).first()
        if clash:
            raise ValidationError("Email already in use")

    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(employee, key, value)

    try:
        db.commit()
        db.refresh(employee)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Update employee error: %s", e)
        raise ValidationError("Failed to update employee")

    return employee


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: EmployeeId,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete an employee together with every task assigned to them"""
    employee = _get_employee_or_404(db, employee_id)

    try:
        removed_tasks = db.query(Task).filter(Task.employee_id == employee.id).delete(synchronize_session=False)
        db.query(User).filter(User.employee_id == employee.id).update(
            {User.employee_id: None}, synchronize_session=False
        )
        db.delete(employee)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete employee error: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete employee")

    logger.info("Employee %s deleted with %d task(s)", employee_id, removed_tasks)
    return {"message": "Employee deleted successfully"}
