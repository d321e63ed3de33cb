"""Session and event API endpoints"""

from fastapi import APIRouter, Depends, Query

from api.schemas import (
    EventCreate,
    ErrorResponse,
    EventResponse,
    PaginationMeta,
    SessionCreate,
    SessionDetailResponse,
    SessionResponse,
)
from app.dependencies import get_config, get_event_log, get_session_store
from core.config import Settings
from storage.event_log import EventLog
from storage.session_store import SessionStore

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)

SESSION_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    session_data: SessionCreate,
    sessions: SessionStore = Depends(get_session_store),
):
    """
    Create a session, or return the existing one with the same sessionId.

    Repeating the call is safe; the language of an existing session is kept.
    """
    session = await sessions.create_or_get(session_data.session_id, session_data.language)
    return SessionResponse.model_validate(session)


@router.post(
    "/{session_id}/events",
    response_model=EventResponse,
    status_code=201,
    responses=SESSION_NOT_FOUND,
)
async def add_event(
    session_id: str,
    event_data: EventCreate,
    events: EventLog = Depends(get_event_log),
):
    """
    Append an event to a session.

    A retried eventId returns the originally stored event with the same
    201 response.
    """
    event = await events.append(
        session_id,
        event_data.event_id,
        event_data.type,
        event_data.payload,
        event_data.timestamp,
    )
    return EventResponse.model_validate(event)


@router.get("/{session_id}", response_model=SessionDetailResponse, responses=SESSION_NOT_FOUND)
async def get_session(
    session_id: str,
    limit: int | None = Query(None, ge=1, description="Events per page (clamped to max)"),
    offset: int = Query(0, ge=0, description="Events to skip"),
    sessions: SessionStore = Depends(get_session_store),
    events: EventLog = Depends(get_event_log),
    settings: Settings = Depends(get_config),
):
    """
    Get a session with a page of its events ordered by timestamp.

    Args:
        session_id: Session identifier
        limit: Page size, defaults to the configured default limit
        offset: Number of events to skip

    Returns:
        Session, events and pagination metadata
    """
    session = await sessions.get(session_id)
    page = await events.list(
        session_id,
        limit=limit if limit is not None else settings.events_default_limit,
        offset=offset,
    )

    return SessionDetailResponse(
        session=SessionResponse.model_validate(session),
        events=[EventResponse.model_validate(event) for event in page.events],
        pagination=PaginationMeta(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
            next_offset=page.next_offset,
        ),
    )


@router.post(
    "/{session_id}/complete",
    response_model=SessionResponse,
    status_code=200,
    responses=SESSION_NOT_FOUND,
)
async def complete_session(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
):
    """Mark a session completed. Repeat calls return the same completed session."""
    session = await sessions.complete(session_id)
    return SessionResponse.model_validate(session)
