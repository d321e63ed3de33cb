"""Event log storage layer"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import SessionNotFoundError, StorageError
from core.utils import to_naive_utc, utcnow
from models.event import Event, EventType
from storage.session_store import SessionStore
from storage.upsert import insert_or_fetch

logger = logging.getLogger(__name__)


@dataclass
class EventPage:
    """One page of a session's events plus the exact total."""

    events: list[Event]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def next_offset(self) -> int | None:
        return self.offset + self.limit if self.has_more else None


class EventLog:
    """Append-only, per-session event storage with ordered pagination."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        sessions: SessionStore,
        max_limit: int = 100,
    ):
        self._session_maker = session_maker
        self._sessions = sessions
        self._max_limit = max_limit

    async def append(
        self,
        session_id: str,
        event_id: str,
        event_type: EventType | str,
        payload: dict[str, Any],
        timestamp: datetime,
    ) -> Event:
        """
        Append an event to a session.

        The (session_id, event_id) pair is the idempotency key: a replay
        returns the event stored by the first write, even if the replayed
        type, payload or timestamp differ.

        Args:
            session_id: Owning session
            event_id: Caller supplied identifier, unique within the session
            event_type: Event kind
            payload: Opaque event data
            timestamp: Caller supplied event time

        Returns:
            The stored event (fresh or previously written)

        Raises:
            SessionNotFoundError: Session does not exist
            StorageError: Any other storage failure
        """
        if not await self._sessions.exists(session_id):
            raise SessionNotFoundError(session_id)

        try:
            event, created = await insert_or_fetch(
                self._session_maker,
                Event,
                {
                    "session_id": session_id,
                    "event_id": event_id,
                    "type": EventType(event_type).value,
                    "payload": payload,
                    "timestamp": to_naive_utc(timestamp),
                    "created_at": utcnow(),
                },
                Event.session_id == session_id,
                Event.event_id == event_id,
            )
        except StorageError:
            logger.error(f"Error adding event {event_id} to session {session_id}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error adding event to session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to add event") from e

        if created:
            logger.info(f"Event {event_id} added to session {session_id}")
        else:
            logger.info(
                f"Event {event_id} already exists for session {session_id}, returning existing event"
            )
        return event

    async def list(self, session_id: str, limit: int = 50, offset: int = 0) -> EventPage:
        """
        Get a page of a session's events ordered by timestamp.

        Events sharing a timestamp keep their insertion order. The limit is
        clamped to [1, max_limit].

        Args:
            session_id: Owning session
            limit: Page size
            offset: Number of events to skip

        Returns:
            EventPage with the events and the exact total for the session
        """
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        limit = max(1, min(limit, self._max_limit))

        if not await self._sessions.exists(session_id):
            raise SessionNotFoundError(session_id)

        query = (
            select(Event)
            .where(Event.session_id == session_id)
            .order_by(Event.timestamp, Event.id)
            .offset(offset)
            .limit(limit)
        )
        count_query = select(func.count(Event.id)).where(Event.session_id == session_id)

        try:
            async with self._session_maker() as db:
                result = await db.execute(query)
                events = list(result.scalars().all())
                total = (await db.execute(count_query)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error listing events for session {session_id}: {e}", exc_info=True)
            raise StorageError("Failed to list events") from e

        logger.info(
            f"Retrieved {len(events)} events for session {session_id} "
            f"({offset}-{offset + limit} of {total})"
        )
        return EventPage(events=events, total=total, limit=limit, offset=offset)
