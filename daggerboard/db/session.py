"""Database engine, session factory and schema initialization."""

import logging
import os
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session as SQLAlchemySession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine = None
_SessionLocal = None

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def get_database_url() -> str:
    """Get database URL from environment or use the local SQLite file."""
    return os.getenv("DATABASE_URL", "sqlite:///./daggerboard.db")


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        database_url = get_database_url()
        echo = os.getenv("DEBUG", "false").lower() == "true"

        if database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if _is_memory_url(database_url):
                # One shared connection, otherwise every checkout sees an empty DB
                kwargs["poolclass"] = StaticPool
            _engine = create_engine(database_url, echo=echo, **kwargs)
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            _engine = create_engine(database_url, pool_pre_ping=True, echo=echo)

    return _engine


def get_session_factory():
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def reset_engine() -> None:
    """Dispose the engine so the next call builds a fresh one."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def upgrade_schema(engine: Engine, revision: str = "head") -> None:
    """Run Alembic up to revision on one connection of engine."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", get_database_url())
    alembic_cfg.attributes["configure_logger"] = False

    sqlite = engine.dialect.name == "sqlite"
    with engine.connect() as connection:
        # Batch migrations rebuild tables; cascades must not fire while they do
        if sqlite:
            connection.exec_driver_sql("PRAGMA foreign_keys=OFF")
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, revision)
        connection.commit()
        if sqlite:
            connection.exec_driver_sql("PRAGMA foreign_keys=ON")
            connection.commit()


def init_db() -> None:
    """Initialize the database by running Alembic migrations to head.

    Falls back to create_all() when the migration environment is missing
    (e.g. an installed wheel without alembic.ini).
    """
    engine = get_engine()
    if not ALEMBIC_INI.exists():
        logger.warning(f"{ALEMBIC_INI} not found, falling back to create_all()")
        Base.metadata.create_all(bind=engine)
        return

    try:
        upgrade_schema(engine)
        logger.info(f"Database initialized via Alembic: {get_database_url()}")
    except Exception as e:
        logger.warning(f"Alembic migration failed ({e}), falling back to create_all()")
        Base.metadata.create_all(bind=engine)
        logger.info(f"Database initialized via create_all: {get_database_url()}")


def drop_db() -> None:
    """Drop all tables (use with caution!)."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped.")


@contextmanager
def get_session() -> Generator[SQLAlchemySession, None, None]:
    """Context manager for unguarded database sessions.

    Usage:
        with get_session() as session:
            session.query(...)
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
