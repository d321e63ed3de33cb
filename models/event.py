"""Event model"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base
from core.utils import utcnow


class EventType(str, Enum):
    """Kinds of events recorded within a session"""

    MESSAGE_SENT = "message_sent"
    MESSAGE_RECEIVED = "message_received"
    USER_JOINED = "user_joined"
    USER_LEFT = "user_left"


class Event(Base):
    """Append-only session event.

    ``id`` doubles as the insertion sequence and breaks ties between
    events that share a timestamp.
    """

    __tablename__ = "events"
    __table_args__ = (
        UniqueConstraint("session_id", "event_id", name="uq_events_session_id_event_id"),
        Index("idx_events_session_id_timestamp", "session_id", "timestamp", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(String(255), nullable=False)
    session_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("sessions.session_id"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Event {self.session_id}/{self.event_id} type={self.type}>"
