"""Dependency injection utilities"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import Settings, get_settings
from core.database import get_session_maker
from storage.event_log import EventLog
from storage.session_store import SessionStore


def get_config() -> Settings:
    """Dependency for getting application config"""
    return get_settings()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency for the database session factory handed to the stores"""
    return get_session_maker()


def get_session_store(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SessionStore:
    """Dependency for session storage"""
    return SessionStore(session_maker)


def get_event_log(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    sessions: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_config),
) -> EventLog:
    """Dependency for event storage"""
    return EventLog(session_maker, sessions, max_limit=settings.events_max_limit)
