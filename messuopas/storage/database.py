"""Database connection and configuration management."""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

import messuopas.models  # noqa: F401  registers every collection on Base.metadata
from messuopas.config import get_settings
from messuopas.models.base import Base


class Database:
    """Database connection manager with connection pooling and transaction handling."""

    def __init__(
        self,
        database_url: str | None = None,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        """
        Initialize database connection.

        Args:
            database_url: Database connection URL. If None, reads from settings.
                         Supports PostgreSQL and SQLite.
            pool_size: Number of connections to maintain in the pool. If None, uses settings.
            max_overflow: Maximum number of connections to allow beyond pool_size. If None, uses settings.
        """
        settings = get_settings()

        if database_url is None:
            database_url = settings.get_database_url()

        engine_args: dict[str, Any] = {
            "pool_pre_ping": True,  # Verify connections before using
            "echo": settings.sql_echo,
        }
        if database_url.startswith("sqlite"):
            # Request handlers run in worker threads
            engine_args["connect_args"] = {"check_same_thread": False}
        else:
            engine_args["pool_size"] = pool_size if pool_size is not None else settings.db_pool_size
            engine_args["max_overflow"] = (
                max_overflow if max_overflow is not None else settings.db_max_overflow
            )
            engine_args["pool_timeout"] = settings.db_pool_timeout

        self.engine = create_engine(database_url, **engine_args)

        if database_url.startswith("sqlite"):
            # Enable foreign keys so subsection rows cascade with their section
            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables."""
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with automatic transaction handling.

        Usage:
            with db.session() as session:
                # Use session here
                session.commit()
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """
        Get a database session. Caller is responsible for closing.

        Returns:
            Database session
        """
        return self.SessionLocal()

    def execute_raw_sql(self, sql: str, params: dict | None = None) -> list[Any]:
        """Execute a raw SQL query and return all rows."""
        with self.session() as session:
            result = session.execute(text(sql), params or {})
            return result.fetchall()


# Global database instance
_db: Database | None = None


def get_db(database_url: str | None = None) -> Database:
    """
    Get or create the global database instance.

    Args:
        database_url: Database connection URL. Only used on first call.

    Returns:
        Database instance
    """
    global _db
    if _db is None:
        _db = Database(database_url)
    return _db


def reset_db() -> None:
    """Reset the global database instance (useful for testing)."""
    global _db
    _db = None
