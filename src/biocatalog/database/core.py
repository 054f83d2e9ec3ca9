import contextlib
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,  # type: ignore[attr-defined]
    create_async_engine,
)
from sqlmodel import SQLModel

# Register every table with SQLModel.metadata before create_all runs
from biocatalog.comments.models import Comment  # noqa: F401
from biocatalog.profiles.models import Profile  # noqa: F401
from biocatalog.species.models import Species  # noqa: F401

logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Turn on SQLite foreign key enforcement for every new connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class DatabaseService:
    """Provides an interface for database operations, including initialization."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_url = f"sqlite+aiosqlite:///{self.db_path}"

        self.async_engine = create_async_engine(
            self.db_url,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        event.listen(self.async_engine.sync_engine, "connect", _enable_foreign_keys)

        self.async_session_local = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.async_engine,
            class_=AsyncSession,
        )

        # Tables are created by initialize(), which must be awaited after construction

    async def initialize(self) -> None:
        """Create tables and apply connection settings."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        await self._apply_startup_optimizations()
        logger.info("Database initialized at %s", self.db_path)

    @contextlib.asynccontextmanager
    async def get_async_db(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide an async database session for dependency injection."""
        async with self.async_session_local() as session:
            yield session

    async def _apply_startup_optimizations(self) -> None:
        """Apply one-time startup pragmas."""
        async with self.get_async_db() as session:
            try:
                await session.execute(text("PRAGMA journal_mode = WAL"))
                await session.execute(text("PRAGMA synchronous = NORMAL"))
                await session.execute(text("PRAGMA optimize"))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.warning("Failed to apply startup optimizations: %s", e)

    async def check_connection(self) -> bool:
        """Run a trivial query to confirm the database answers."""
        async with self.get_async_db() as session:
            try:
                await session.execute(text("SELECT 1"))
                return True
            except SQLAlchemyError as e:
                logger.warning("Database connectivity check failed: %s", e)
                return False

    async def clear_database(self) -> None:
        """Clear all data from the database tables."""
        async with self.get_async_db() as session:
            try:
                for table in reversed(SQLModel.metadata.sorted_tables):
                    await session.execute(table.delete())
                await session.commit()
                logger.info("Database cleared successfully")
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error clearing database: %s", e)
                raise

    async def dispose(self) -> None:
        """Dispose of database engines to release resources.

        This should be called when the DatabaseService is no longer needed,
        especially in tests, to prevent file descriptor leaks.
        """
        if hasattr(self, "async_engine") and self.async_engine:
            await self.async_engine.dispose()
            logger.debug("Async database engine disposed")
