# app/config/settings.py
# Runtime configuration for the task tracker API

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5000,http://localhost:5173"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """Application settings read from the environment.

    Keyword arguments override the environment, which is how the tests
    build an app against an in-memory database.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        database_sslmode: Optional[str] = None,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_days: Optional[int] = None,
        bcrypt_rounds: Optional[int] = None,
        cors_origins: Optional[List[str]] = None,
        log_level: Optional[str] = None,
    ):
        self.database_url = database_url or os.getenv("DATABASE_URL", "sqlite:///./task_tracker.db")
        self.database_sslmode = database_sslmode or os.getenv("DATABASE_SSLMODE")
        self.secret_key = secret_key or os.getenv("SECRET_KEY", "fallback-secret-key")
        self.algorithm = algorithm or os.getenv("ALGORITHM", "HS256")
        self.access_token_expire_days = access_token_expire_days or int(
            os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 7)
        )
        self.bcrypt_rounds = bcrypt_rounds or int(os.getenv("BCRYPT_ROUNDS", 10))
        self.cors_origins = cors_origins if cors_origins is not None else _split_origins(
            os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        )
        self.log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_memory_database(self) -> bool:
        return self.is_sqlite and (
            self.database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in self.database_url
        )
