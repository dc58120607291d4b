import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Employee, User, UserRole
from app.schemas.tokens import Token
from app.schemas.user import UserCreate, UserLogin, UserOut
from app.utils.auth import get_current_user
from app.utils.exceptions import AuthenticationError, ValidationError
from app.utils.security import (
    create_access_token,
    dummy_verify_password,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Title given to the employee record created for self-registered users
DEFAULT_EMPLOYEE_ROLE = "Team Member"


def _issue_token(request: Request, user: User) -> str:
    settings = request.app.state.settings
    return create_access_token(
        user.id,
        settings.secret_key,
        algorithm=settings.algorithm,
        expire_days=settings.access_token_expire_days,
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    existing_user = db.query(User).filter(
        or_(User.email == payload.email, User.username == payload.username)
    ).first()
    if existing_user:
        if existing_user.email == payload.email:
            raise ValidationError("Email already in use")
        raise ValidationError("Username already taken")

    role = payload.role or UserRole.USER

    try:
        employee = None
        if role == UserRole.USER:
            if db.query(Employee).filter(Employee.email == payload.email).first():
                raise ValidationError("Email already in use")
            employee = Employee(name=payload.username, role=DEFAULT_EMPLOYEE_ROLE, email=payload.email)
            db.add(employee)
            db.flush()

        user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=get_password_hash(payload.password, request.app.state.pwd_context),
            role=role,
            employee_id=employee.id if employee else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Registration error: %s", e)
        raise ValidationError("Registration failed")

    logger.info("Registered %s user %s (id=%s)", role.value, user.username, user.id)
    return Token(user=UserOut.model_validate(user), token=_issue_token(request, user))


@router.post("/login", response_model=Token)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    context = request.app.state.pwd_context
    user = db.query(User).filter(User.email == payload.email).first()
    # Same answer, and roughly the same latency, for unknown email and wrong password
    if not user:
        dummy_verify_password(context)
        raise AuthenticationError("Invalid email or password")
    if not verify_password(payload.password, user.hashed_password, context):
        raise AuthenticationError("Invalid email or password")

    return Token(user=UserOut.model_validate(user), token=_issue_token(request, user))


@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user
