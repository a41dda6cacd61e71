from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import get_settings
from questcore.core.exceptions import PersistenceError
from questcore.db.models.base import Base


def _create_engine(url: str, echo: bool) -> Engine:
    """Create an engine, preparing local SQLite files and in-memory databases."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    database = parsed.database
    if not database or database == ":memory:":
        # Share one connection so every session sees the same in-memory database
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo)


class Database:
    """Engine and session factory for one database URL."""

    def __init__(self, url: str | None = None, echo: bool | None = None):
        settings = get_settings()
        self.url = url or settings.database_url
        if echo is None:
            echo = settings.log_level == "DEBUG"
        try:
            self.engine = _create_engine(self.url, echo=echo)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Could not open database {self.url}: {e}") from e
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def init_db(self) -> None:
        """Initialize database tables."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not initialize tables: {e}") from e
        logger.info(f"Database tables initialized at {self.engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:  # Intentionally broad - rollback on any error before re-raising
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


@lru_cache
def get_database() -> Database:
    """Get the application database (from settings), with tables created."""
    database = Database()
    database.init_db()
    return database
