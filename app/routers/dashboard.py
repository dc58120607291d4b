# app/routers/dashboard.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Employee, Task, User
from app.schemas.dashboard import DashboardStats
from app.utils.access import AccessManager
from app.utils.auth import get_optional_user
from app.utils.stats import compute_dashboard_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Summary counts over the caller's visible tasks, recomputed on every request"""
    access = AccessManager(current_user)

    try:
        visible_tasks = access.restrict_tasks(db.query(Task)).all()
        employees = db.query(Employee).all()
        all_tasks = None
        if access.sees_employee_breakdown:
            all_tasks = visible_tasks
    except SQLAlchemyError as e:
        logger.error("Dashboard error: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data")

    return DashboardStats(**compute_dashboard_stats(visible_tasks, employees, all_tasks))
