from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRole
from app.schemas.base import CamelModel, Email, normalize_email


class UserCreate(CamelModel):
    username: str = Field(min_length=3)
    email: Email
    password: str = Field(min_length=6)
    role: Optional[UserRole] = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserLogin(CamelModel):
    # Plain str: a malformed address gets the same 401 as an unknown one
    email: str
    password: str = Field(min_length=1)

    lower_email = field_validator("email", mode="before")(normalize_email)


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    role: UserRole
    employee_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
