"""Session storage layer"""

import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import SessionNotFoundError, StorageError
from core.utils import utcnow
from models.session import Session, SessionStatus
from storage.upsert import insert_or_fetch

logger = logging.getLogger(__name__)


class SessionStore:
    """Storage layer for session lifecycle.

    Holds no state beyond the session factory; every call is one or two
    independent round trips whose atomicity comes from the database.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def create_or_get(self, session_id: str, language: str) -> Session:
        """
        Ensure a session exists and return it.

        A pre-existing session is returned unchanged; the supplied language
        only applies when this call creates the record.

        Args:
            session_id: Caller supplied session identifier
            language: Session language, used on first creation only

        Returns:
            The stored session
        """
        now = utcnow()
        try:
            session, created = await insert_or_fetch(
                self._session_maker,
                Session,
                {
                    "session_id": session_id,
                    "language": language,
                    "status": SessionStatus.ACTIVE.value,
                    "started_at": now,
                    "ended_at": None,
                    "created_at": now,
                    "updated_at": now,
                },
                Session.session_id == session_id,
            )
        except StorageError:
            logger.error(f"Error creating session {session_id}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to create session") from e

        if created:
            logger.info(f"Session created: {session_id}")
        else:
            logger.info(f"Session already exists, returning stored record: {session_id}")
        return session

    async def get(self, session_id: str) -> Session:
        """Get a session by its identifier, raising SessionNotFoundError if absent."""
        try:
            async with self._session_maker() as db:
                result = await db.execute(select(Session).where(Session.session_id == session_id))
                session = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error loading session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to load session") from e

        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def exists(self, session_id: str) -> bool:
        """Check whether a session exists."""
        try:
            async with self._session_maker() as db:
                result = await db.execute(
                    select(Session.id).where(Session.session_id == session_id)
                )
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to check session") from e

    async def complete(self, session_id: str) -> Session:
        """
        Mark a session completed.

        Runs as a single UPDATE. The first completion fixes ended_at; later
        calls leave ended_at and updated_at untouched and return the same
        record.

        Args:
            session_id: Session identifier

        Returns:
            The completed session
        """
        now = utcnow()
        stmt = (
            update(Session)
            .where(Session.session_id == session_id)
            .values(
                status=SessionStatus.COMPLETED.value,
                ended_at=func.coalesce(Session.ended_at, now),
                updated_at=case((Session.ended_at.is_(None), now), else_=Session.updated_at),
            )
            .returning(Session)
            .execution_options(synchronize_session=False)
        )

        try:
            async with self._session_maker() as db:
                result = await db.execute(stmt)
                session = result.scalar_one_or_none()
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error completing session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to complete session") from e

        if session is None:
            raise SessionNotFoundError(session_id)

        logger.info(f"Session {session_id} completed")
        return session
