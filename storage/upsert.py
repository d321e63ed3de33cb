"""Insert-or-fetch primitive shared by the session and event stores."""

import logging
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.database import Base
from core.errors import StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def insert_or_fetch(
    session_maker: async_sessionmaker[AsyncSession],
    model: type[ModelT],
    values: dict[str, Any],
    *key: ColumnElement[bool],
) -> tuple[ModelT, bool]:
    """
    Insert a row, or return the row already stored under the same unique key.

    The insert runs in its own transaction. A unique-key violation means a
    concurrent or earlier write won; that row is re-read and returned instead.
    Existing rows are never modified.

    Args:
        session_maker: Factory for database sessions
        model: Mapped class to insert
        values: Column values for the new row
        *key: WHERE clauses identifying the row by its unique key

    Returns:
        Tuple of (row, created) where created is False for a replay

    Raises:
        StorageError: Integrity failure with no matching row (not a duplicate)
        SQLAlchemyError: Any other storage failure, left to the caller
    """
    async with session_maker() as db:
        row = model(**values)
        db.add(row)
        try:
            await db.commit()
            return row, True
        except IntegrityError as exc:
            await db.rollback()
            logger.debug(f"Duplicate key on {model.__tablename__}, fetching stored row")

            result = await db.execute(select(model).where(*key))
            existing = result.scalar_one_or_none()
            if existing is None:
                raise StorageError(
                    f"Integrity error on {model.__tablename__} with no existing row"
                ) from exc
            return existing, False
