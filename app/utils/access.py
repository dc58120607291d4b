# app/utils/access.py
from typing import Optional

from sqlalchemy import false
from sqlalchemy.orm import Query

from app.models.task import Task
from app.models.user import User
from app.utils.exceptions import AuthorizationError


class AccessManager:
    """Task visibility and ownership rules for a (possibly anonymous) caller."""

    def __init__(self, user: Optional[User]):
        self.user = user

    @property
    def is_anonymous(self) -> bool:
        return self.user is None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    @property
    def sees_all_tasks(self) -> bool:
        # Anonymous callers get the unfiltered list; see DESIGN.md
        return self.is_anonymous or self.is_admin

    @property
    def sees_employee_breakdown(self) -> bool:
        return self.sees_all_tasks

    def restrict_tasks(self, query: Query) -> Query:
        """Apply the visibility rule to a Task query."""
        if self.sees_all_tasks:
            return query
        if self.user.employee_id is None:
            return query.filter(false())
        return query.filter(Task.employee_id == self.user.employee_id)

    def owns_task(self, task: Task) -> bool:
        return (
            self.user is not None
            and self.user.employee_id is not None
            and self.user.employee_id == task.employee_id
        )

    def can_update_task(self, task: Task) -> bool:
        return self.is_admin or self.owns_task(task)

    def ensure_can_update_task(self, task: Task):
        if not self.can_update_task(task):
            raise AuthorizationError("You can only update your own tasks")
