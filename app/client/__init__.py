from .api import ApiError, TaskTrackerClient
from .filters import count_tasks_for_employee, search_employees, search_tasks
