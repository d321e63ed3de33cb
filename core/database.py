"""Database connection and session management."""

from threading import Lock
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


def build_engine(database_url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    settings = get_settings()

    if "postgresql" in database_url:
        engine_kwargs: dict[str, Any] = {
            "echo": settings.database_echo,
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
            "pool_pre_ping": True,
        }
    else:
        engine_kwargs = {"echo": settings.database_echo}

    engine_kwargs.update(overrides)
    return create_async_engine(database_url, **engine_kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory handed to the stores."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class DatabaseManager:
    """Singleton manager for database engine and session maker."""

    _instance: "DatabaseManager | None" = None
    _lock: Lock = Lock()

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_maker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def get_instance(cls) -> "DatabaseManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get_engine(self) -> AsyncEngine:
        """Get or create database engine."""
        if self._engine is None:
            settings = get_settings()
            self._engine = build_engine(settings.database_url)
            self._async_session_maker = build_session_maker(self._engine)

        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        """Get or create async session maker."""
        self.get_engine()
        if self._async_session_maker is None:
            raise RuntimeError("Session maker not initialized")
        return self._async_session_maker

    async def close(self) -> None:
        """Close database connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._async_session_maker = None

    def reset(self) -> None:
        """Reset cached engine/session maker."""
        self._engine = None
        self._async_session_maker = None


_db_manager = DatabaseManager.get_instance()


def get_engine() -> AsyncEngine:
    """Get or create database engine."""
    return _db_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create async session maker."""
    return _db_manager.get_session_maker()


async def init_db() -> None:
    """Create tables and indexes if they do not exist (development only)"""
    import models  # noqa: F401  registers tables on Base.metadata

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def reset_db() -> None:
    """Drop and recreate all tables"""
    import models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections"""
    await _db_manager.close()


def reset_engine() -> None:
    """Reset cached engine/session maker"""
    _db_manager.reset()
