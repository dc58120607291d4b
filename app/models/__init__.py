from .user import User, UserRole
from .employee import Employee
from .task import Task, TaskStatus, transition
