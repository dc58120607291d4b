"""
Master Database Seeding Script
Creates database tables and populates them with demo users, employees and tasks
"""

import sys
from datetime import date, timedelta

from dotenv import load_dotenv

from app.config.settings import Settings
from app.database import Database
from app.models import Employee, Task, TaskStatus, User, UserRole
from app.utils.security import build_password_context, get_password_hash, pwd_context

# Structure: username, email, password, role. "user" accounts get a linked employee.
DEMO_USERS = [
    {"username": "admin", "email": "admin@tasktracker.com", "password": "admin123", "role": UserRole.ADMIN},
    {"username": "ana.lee", "email": "ana@tasktracker.com", "password": "password123", "role": UserRole.USER},
]

DEMO_EMPLOYEES = [
    {"name": "Ben Ortiz", "role": "Backend Engineer", "email": "ben@tasktracker.com"},
    {"name": "Chloe Park", "role": "Designer", "email": "chloe@tasktracker.com"},
    {"name": "Dev Patel", "role": "QA Engineer", "email": "dev@tasktracker.com"},
]

# Structure: title, description, assignee email, status, due in N days (None for no due date)
DEMO_TASKS = [
    {"title": "Set up CI", "description": "Configure the build pipeline for pull requests", "employee": "ana@tasktracker.com", "status": TaskStatus.COMPLETED, "due_in": -3},
    {"title": "Write onboarding guide", "description": "Document local setup for new hires", "employee": "ana@tasktracker.com", "status": TaskStatus.IN_PROGRESS, "due_in": 4},
    {"title": "Add task search endpoint", "description": None, "employee": "ben@tasktracker.com", "status": TaskStatus.PENDING, "due_in": 10},
    {"title": "Database backup job", "description": "Nightly backups with 14 day retention", "employee": "ben@tasktracker.com", "status": TaskStatus.IN_PROGRESS, "due_in": None},
    {"title": "Dashboard mockups", "description": "Status and per-employee charts", "employee": "chloe@tasktracker.com", "status": TaskStatus.PENDING, "due_in": 7},
    {"title": "Regression test plan", "description": "Cover the task update permissions", "employee": "dev@tasktracker.com", "status": TaskStatus.COMPLETED, "due_in": -1},
]


def seed_demo_users(session, context=pwd_context):
    """Create demo users (and their employees) in the database"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Users")
    print(f"{'='*60}")

    created = 0
    for user_data in DEMO_USERS:
        if session.query(User).filter(User.email == user_data["email"]).first():
            print(f"[SKIP] User {user_data['email']} already exists, skipping...")
            continue

        employee = None
        if user_data["role"] == UserRole.USER:
            employee = Employee(name=user_data["username"], role="Team Member", email=user_data["email"])
            session.add(employee)
            session.flush()

        session.add(User(
            username=user_data["username"],
            email=user_data["email"],
            hashed_password=get_password_hash(user_data["password"], context),
            role=user_data["role"],
            employee_id=employee.id if employee else None,
        ))
        created += 1
        print(f"[SUCCESS] Created user: {user_data['username']} ({user_data['role'].value})")

    session.commit()
    return created


def seed_demo_employees(session):
    """Create demo employees in the database"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Employees")
    print(f"{'='*60}")

    created = 0
    for employee_data in DEMO_EMPLOYEES:
        if session.query(Employee).filter(Employee.email == employee_data["email"]).first():
            print(f"[SKIP] Employee {employee_data['email']} already exists, skipping...")
            continue

        session.add(Employee(**employee_data))
        created += 1
        print(f"[SUCCESS] Created employee: {employee_data['name']} ({employee_data['role']})")

    session.commit()
    return created


def seed_demo_tasks(session):
    """Create demo tasks assigned to the demo employees"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Tasks")
    print(f"{'='*60}")

    created = 0
    today = date.today()
    for task_data in DEMO_TASKS:
        employee = session.query(Employee).filter(Employee.email == task_data["employee"]).first()
        if not employee:
            print(f"[WARNING] Employee {task_data['employee']} not found, skipping task '{task_data['title']}'")
            continue

        exists = session.query(Task).filter(
            Task.title == task_data["title"],
            Task.employee_id == employee.id,
        ).first()
        if exists:
            print(f"[SKIP] Task '{task_data['title']}' already exists, skipping...")
            continue

        due_in = task_data["due_in"]
        session.add(Task(
            title=task_data["title"],
            description=task_data["description"],
            status=task_data["status"],
            employee_id=employee.id,
            due_date=today + timedelta(days=due_in) if due_in is not None else None,
        ))
        created += 1
        print(f"[SUCCESS] Created task: {task_data['title']} -> {employee.name}")

    session.commit()
    return created


def seed_all(database: Database, context=pwd_context) -> dict:
    """Create tables and every kind of demo record. Safe to run repeatedly."""
    database.create_all()
    session = database.session()
    try:
        return {
            "users": seed_demo_users(session, context),
            "employees": seed_demo_employees(session),
            "tasks": seed_demo_tasks(session),
        }
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def main():
    load_dotenv()
    settings = Settings()
    context = build_password_context(settings.bcrypt_rounds)
    database = Database(settings)

    try:
        summary = seed_all(database, context)
    except Exception as e:
        print(f"[ERROR] Seeding failed: {e}")
        return 1
    finally:
        database.dispose()

    print(f"\n{'='*60}")
    print("[SUCCESS] Seeding complete: "
          f"{summary['users']} users, {summary['employees']} employees, {summary['tasks']} tasks")
    print("Demo login: admin@tasktracker.com / admin123 (admin), ana@tasktracker.com / password123 (user)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
