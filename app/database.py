import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.settings import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, settings: Settings):
        engine_kwargs = {}
        if settings.is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if settings.is_memory_database:
                # every session must see the same in-memory database
                engine_kwargs["poolclass"] = StaticPool
        elif settings.database_sslmode:
            # If you're using PostgreSQL on Render or similar, set sslmode=require
            engine_kwargs["connect_args"] = {"sslmode": settings.database_sslmode}

        self.engine = create_engine(settings.database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # models must be imported so their tables are registered on Base
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured on %s", self.engine.url.render_as_string(hide_password=True))

    def drop_all(self):
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()
        logger.info("Database engine disposed")


# ✅ This is required to be imported wherever DB session is needed
def get_db(request: Request) -> Iterator[Session]:
    db: Session = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
