# app/schemas/tokens.py
from app.schemas.base import CamelModel
from app.schemas.user import UserOut


class Token(CamelModel):
    user: UserOut
    token: str
