"""
Database engine and session management
PostgreSQL in staging/production, SQLite allowed for local development and tests
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..config import config

logger = logging.getLogger(__name__)


def create_database_engine(url: str):
    """Create an engine with pool settings appropriate for the backend"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection so every session sees the same in-memory database
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, **kwargs)

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info("Database engine configured for SQLite")
        return sqlite_engine

    logger.info("Database engine configured for PostgreSQL")
    return create_engine(
        url,
        pool_pre_ping=True,  # detect dead connections before use
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_recycle=config.DB_POOL_RECYCLE,
        pool_timeout=config.DB_POOL_TIMEOUT,
        echo=False,
        connect_args={
            "connect_timeout": 10,
            "application_name": "retro_meeting",
        },
    )


engine = create_database_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a session per request

    Services commit their own work; anything left uncommitted when the
    request fails is rolled back here.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create tables that don't exist yet (dev convenience; migrations own prod)"""
    from .base import Base
    from . import models  # noqa: F401  registers models on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


def test_connection() -> bool:
    """Return True if the database answers a trivial query"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        return False
