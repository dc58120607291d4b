from .user import UserCreate, UserLogin, UserOut
from .tokens import Token
from .employee import EmployeeCreate, EmployeeUpdate, EmployeeBasic, EmployeeOut
from .task import TaskCreate, TaskUpdate, TaskOut, TaskWithEmployee
from .dashboard import DashboardStats, StatusCount, EmployeeTaskCount
