# app/utils/auth.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.utils.exceptions import AuthenticationError, AuthorizationError
from app.utils.security import decode_access_token

# auto_error is off so missing headers surface as our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def _load_user(token: str, request: Request, db: Session) -> Optional[User]:
    settings = request.app.state.settings
    user_id = decode_access_token(token, settings.secret_key, settings.algorithm)
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user or fail with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required")

    settings = request.app.state.settings
    user_id = decode_access_token(credentials.credentials, settings.secret_key, settings.algorithm)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationError("User not found")

    request.state.user = user
    return user


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but any missing or bad token just means anonymous."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None

    user = _load_user(credentials.credentials, request, db)
    request.state.user = user
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user
