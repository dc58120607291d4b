# app/utils/security.py
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


# Used when no application context is passed in (scripts, tests)
pwd_context = build_password_context(int(os.getenv("BCRYPT_ROUNDS", 10)))


def get_password_hash(password: str, context: CryptContext = pwd_context) -> str:
    return context.hash(password)


def verify_password(plain_password: str, hashed_password: str, context: CryptContext = pwd_context) -> bool:
    """Constant-time comparison of a candidate password against a stored hash."""
    return context.verify(plain_password, hashed_password)


def dummy_verify_password(context: CryptContext = pwd_context):
    """Spend the time of a real verify when there is no stored hash to check."""
    context.dummy_verify()


def create_access_token(user_id: int, secret_key: str, algorithm: str = "HS256", expire_days: int = 7) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=expire_days)
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Optional[int]:
    """Return the user id carried by a valid token, None otherwise (bad signature, expired, malformed)."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
