"""Import all models"""

from core.database import Base
from models.event import Event, EventType
from models.session import Session, SessionStatus

__all__ = [
    "Base",
    "Session",
    "SessionStatus",
    "Event",
    "EventType",
]
