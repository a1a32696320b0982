"""Database connection and session management for the user directory."""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bastion.core.config import Settings, settings

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")

logger = logging.getLogger(__name__)


def engine_options(cfg: Settings) -> dict[str, Any]:
    """Engine keyword arguments that bound every connect and statement by a timeout."""
    url = cfg.DATABASE_URL
    if url.startswith("sqlite"):
        options: dict[str, Any] = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": cfg.DB_CONNECT_TIMEOUT_SEC,
            },
        }
        # One shared connection, otherwise each thread would see its own empty database.
        if url in IN_MEMORY_SQLITE_URLS:
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,
        "pool_timeout": cfg.DB_POOL_TIMEOUT_SEC,
        "connect_args": {
            "connect_timeout": cfg.DB_CONNECT_TIMEOUT_SEC,
            "options": f"-c statement_timeout={cfg.DB_STATEMENT_TIMEOUT_MS}",
        },
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **engine_options(settings),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database connectivity check failed: %s", e)
        return False
