"""Database engine and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DatabaseError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tastypath.db.models import Base

logger = logging.getLogger(__name__)


def create_sqlite_engine(database_path: Optional[Path] = None) -> Engine:
    """Return an engine for ``database_path`` with the schema created.

    Without a path the database lives in memory on a single shared connection.
    """

    if database_path is None:
        engine = create_engine(
            "sqlite://",
            future=True,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        database_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(f"sqlite:///{database_path}", future=True, echo=False)
    try:
        Base.metadata.create_all(engine)
    except OperationalError as exc:
        if "already exists" in str(exc).lower():
            logger.debug("Database schema already initialized: %s", exc)
        else:
            engine.dispose()
            raise
    except DatabaseError:
        engine.dispose()
        raise
    return engine


class Database:
    """Engine plus session factory for one shopping list database."""

    def __init__(self, database_path: Optional[Path] = None) -> None:
        self.engine = create_sqlite_engine(database_path)
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, future=True
        )

    def get_session(self) -> Session:
        """Return a new SQLAlchemy session."""
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager yielding a session with automatic commit/rollback."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Database", "create_sqlite_engine"]
