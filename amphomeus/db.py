"""
Amphomeus database connection
"""
from contextlib import contextmanager
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .utils.settings import (
    AMPHOMEUS_DB_URI,
    AMPHOMEUS_DB_URI_READ_ONLY,
    AMPHOMEUS_DB_POOL_RECYCLE_SECONDS,
    AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS,
    AMPHOMEUS_DB_POOL_SIZE,
    AMPHOMEUS_DB_MAX_OVERFLOW,
)


def create_amphomeus_engine(
    url: Optional[str],
    pool_size: int,
    max_overflow: int,
    statement_timeout: int,
    pool_recycle: int = AMPHOMEUS_DB_POOL_RECYCLE_SECONDS,
):
    # SQLite is used for local development and tests, a single shared connection
    # keeps in-memory databases alive between sessions.
    if url is not None and url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url=url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    # Pooling: https://docs.sqlalchemy.org/en/14/core/pooling.html#sqlalchemy.pool.QueuePool
    # Statement timeout: https://stackoverflow.com/a/44936982
    kwargs: Dict[str, Any] = {
        "pool_size": pool_size,
        "pool_recycle": pool_recycle,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
    }
    if url is not None and url.startswith("postgresql"):
        kwargs["connect_args"] = {"options": f"-c statement_timeout={statement_timeout}"}
    return create_engine(url=url, **kwargs)


engine = create_amphomeus_engine(
    url=AMPHOMEUS_DB_URI,
    pool_size=AMPHOMEUS_DB_POOL_SIZE,
    max_overflow=AMPHOMEUS_DB_MAX_OVERFLOW,
    statement_timeout=AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS,
    pool_recycle=AMPHOMEUS_DB_POOL_RECYCLE_SECONDS,
)
SessionLocal = sessionmaker(bind=engine)


def yield_connection_from_env() -> Session:
    """
    Yields a database connection (created using environment variables). As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/sql-databases/#create-a-dependency
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# Read only database, falls back to the primary engine when no replica is configured
if AMPHOMEUS_DB_URI_READ_ONLY == AMPHOMEUS_DB_URI:
    RO_engine = engine
else:
    RO_engine = create_amphomeus_engine(
        url=AMPHOMEUS_DB_URI_READ_ONLY,
        pool_size=AMPHOMEUS_DB_POOL_SIZE,
        max_overflow=AMPHOMEUS_DB_MAX_OVERFLOW,
        statement_timeout=AMPHOMEUS_DB_STATEMENT_TIMEOUT_MILLIS,
        pool_recycle=AMPHOMEUS_DB_POOL_RECYCLE_SECONDS,
    )
RO_SessionLocal = sessionmaker(bind=RO_engine)


def yield_db_read_only_session() -> Session:
    """
    Yields read only database connection (created using environment variables).
    As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/sql-databases/#create-a-dependency
    """
    session = RO_SessionLocal()
    try:
        yield session
    finally:
        session.close()


yield_connection_from_env_ctx = contextmanager(yield_connection_from_env)
