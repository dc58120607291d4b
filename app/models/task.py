from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from app.database import Base
import enum
from datetime import datetime


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# Every status may move to every other status; there is no terminal state.
ALLOWED_TRANSITIONS = {
    status: frozenset(TaskStatus) for status in TaskStatus
}


def transition(current: TaskStatus, target: TaskStatus) -> TaskStatus:
    """Return the new status for a task moving from ``current`` to ``target``."""
    target = TaskStatus(target)
    if target not in ALLOWED_TRANSITIONS[TaskStatus(current)]:
        raise ValueError(f"Cannot move task from {current} to {target}")
    return target


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)

    status = Column(
        Enum(TaskStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        default=TaskStatus.PENDING,
        nullable=False,
    )

    # Non-owning reference; the employee delete path removes these rows first
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

    # Date only, no time component
    due_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee", back_populates="tasks")
