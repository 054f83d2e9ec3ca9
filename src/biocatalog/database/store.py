"""Row-level persistence operations shared by every catalog table.

Each call opens its own session and commits or rolls back before returning.
Any database failure surfaces as a ``PersistenceError`` whose message can be
shown to the user verbatim.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlmodel import SQLModel

from biocatalog.database.core import DatabaseService

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class PersistenceError(Exception):
    """Raised when a create, update, delete, or list operation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _describe(error: Exception) -> str:
    """Human-readable message for a database error."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class DataStore:
    """Insert, select, update, and delete rows with equality filters."""

    def __init__(self, database_service: DatabaseService) -> None:
        self.database_service = database_service

    async def create(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        """Insert a new row and return it with generated fields populated."""
        async with self.database_service.get_async_db() as session:
            instance = model(**values)
            session.add(instance)
            try:
                await session.commit()
                await session.refresh(instance)
            except (SQLAlchemyError, OverflowError) as e:
                await session.rollback()
                logger.error("Error creating %s row: %s", model.__tablename__, e)
                raise PersistenceError(_describe(e)) from e
            return instance

    async def get(self, model: type[ModelT], row_id: Any) -> ModelT | None:
        """Fetch a row by primary key."""
        async with self.database_service.get_async_db() as session:
            try:
                return await session.get(model, row_id)
            except SQLAlchemyError as e:
                logger.error("Error loading %s %s: %s", model.__tablename__, row_id, e)
                raise PersistenceError(_describe(e)) from e

    async def list(
        self,
        model: type[ModelT],
        order_by: str,
        descending: bool = False,
        **match: Any,
    ) -> list[ModelT]:
        """Select rows matching every ``column=value`` filter, ordered by one column."""
        column = getattr(model, order_by)
        stmt = select(model)
        for name, value in match.items():
            stmt = stmt.where(getattr(model, name) == value)
        stmt = stmt.order_by(column.desc() if descending else column.asc())

        async with self.database_service.get_async_db() as session:
            try:
                result = await session.execute(stmt)
                return list(result.scalars().all())
            except SQLAlchemyError as e:
                logger.error("Error listing %s: %s", model.__tablename__, e)
                raise PersistenceError(_describe(e)) from e

    async def update(
        self,
        model: type[ModelT],
        row_id: Any,
        values: dict[str, Any],
        **match: Any,
    ) -> ModelT:
        """Replace the given columns on one row.

        Extra ``match`` filters must also hold, otherwise the row is treated as missing.
        """
        async with self.database_service.get_async_db() as session:
            try:
                instance = await self._find(session, model, row_id, match)
                for name, value in values.items():
                    setattr(instance, name, value)
                await session.commit()
                await session.refresh(instance)
            except (SQLAlchemyError, OverflowError) as e:
                await session.rollback()
                logger.error("Error updating %s %s: %s", model.__tablename__, row_id, e)
                raise PersistenceError(_describe(e)) from e
            return instance

    async def delete(self, model: type[ModelT], row_id: Any, **match: Any) -> None:
        """Delete one row, subject to the same ``match`` filters as update."""
        async with self.database_service.get_async_db() as session:
            try:
                instance = await self._find(session, model, row_id, match)
                await session.delete(instance)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error deleting %s %s: %s", model.__tablename__, row_id, e)
                raise PersistenceError(_describe(e)) from e

    @staticmethod
    async def _find(session: Any, model: type[ModelT], row_id: Any, match: dict) -> ModelT:
        stmt = select(model).where(model.id == row_id)  # type: ignore[attr-defined]
        for name, value in match.items():
            stmt = stmt.where(getattr(model, name) == value)
        result = await session.execute(stmt)
        instance = result.scalars().first()
        if instance is None:
            raise PersistenceError(f"No {model.__tablename__} row {row_id} matches this request")
        return instance
