from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.base import CamelModel, Email


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class EmployeeCreate(CamelModel):
    name: str = Field(min_length=2)
    role: str = Field(min_length=2)
    email: Email

    strip_text = field_validator("name", "role", mode="before")(_strip)


class EmployeeUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2)
    role: Optional[str] = Field(default=None, min_length=2)
    email: Optional[Email] = None

    strip_text = field_validator("name", "role", mode="before")(_strip)


class EmployeeBasic(CamelModel):
    id: int
    name: str
    email: str
    role: str


class EmployeeOut(EmployeeBasic):
    created_at: datetime
    updated_at: Optional[datetime] = None
