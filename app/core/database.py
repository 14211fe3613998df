"""
Database configuration and async session management.
Supports SQLite (default) and PostgreSQL (optional override).
"""
import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.logging_config import _sanitize_data

logger = logging.getLogger(__name__)


def _build_async_database_url(database_url: str) -> str:
    url = make_url(database_url)
    if url.drivername.startswith("sqlite"):
        drivername = "sqlite+aiosqlite"
    elif url.drivername.startswith("postgres"):
        drivername = "postgresql+asyncpg"
    else:
        drivername = url.drivername
    return url.set(drivername=drivername).render_as_string(hide_password=False)


database_url = settings.effective_database_url
database_type = settings.database_type

logger.info(f"Using {database_type} database: {_sanitize_data(database_url)}")

if database_type == "sqlite":
    async_engine = create_async_engine(_build_async_database_url(database_url), echo=False)

    @event.listens_for(async_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Set SQLite-specific pragma settings."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")  # Better concurrency
        cursor.close()

else:
    async_engine = create_async_engine(
        _build_async_database_url(database_url),
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=5,
        pool_recycle=3600,  # Recycle connections every hour
    )
    logger.info("Configured PostgreSQL engine with connection pooling")

async_session_factory = sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

