"""API Pydantic schemas for request/response validation"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from core.utils import isoformat_utc
from models.event import EventType
from models.session import SessionStatus

# Stored datetimes are naive UTC; responses always carry the Z suffix
UTCDateTime = Annotated[datetime, PlainSerializer(isoformat_utc, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(default="healthy")
    database_connected: bool = False
    database_error: str | None = None
    version: str = Field(default="0.1.0")


class SessionCreate(CamelModel):
    """Session creation schema"""

    session_id: str = Field(min_length=1, max_length=255)
    language: str = Field(min_length=1, max_length=50)


class SessionResponse(CamelModel):
    """Session response schema"""

    session_id: str
    status: SessionStatus
    language: str
    started_at: UTCDateTime
    ended_at: UTCDateTime | None = None
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None


class EventCreate(CamelModel):
    """Event creation schema"""

    event_id: str = Field(min_length=1, max_length=255)
    type: EventType
    payload: dict[str, Any]
    timestamp: datetime


class EventResponse(CamelModel):
    """Event response schema"""

    event_id: str
    session_id: str
    type: EventType
    payload: dict[str, Any]
    timestamp: UTCDateTime
    created_at: UTCDateTime | None = None


class PaginationMeta(CamelModel):
    """Offset pagination metadata"""

    total: int
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None = None


class SessionDetailResponse(CamelModel):
    """Session with one page of its events"""

    session: SessionResponse
    events: list[EventResponse]
    pagination: PaginationMeta


class ErrorResponse(CamelModel):
    """Uniform error body"""

    status_code: int
    timestamp: UTCDateTime
    path: str
    message: str
