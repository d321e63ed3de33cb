"""Session store tests"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from core.errors import SessionNotFoundError, StorageError
from models.session import Session, SessionStatus
from storage.session_store import SessionStore


class TestCreateOrGet:
    """Session creation is idempotent per session_id."""

    async def test_creates_active_session(self, session_store):
        session = await session_store.create_or_get("s-1", "en")

        assert session.session_id == "s-1"
        assert session.status == SessionStatus.ACTIVE.value
        assert session.language == "en"
        assert session.started_at is not None
        assert session.ended_at is None

    async def test_existing_session_returned_unchanged(self, session_store):
        first = await session_store.create_or_get("s-1", "en")
        second = await session_store.create_or_get("s-1", "fr")

        assert second.id == first.id
        assert second.language == "en"
        assert second.started_at == first.started_at

    async def test_concurrent_creates_store_one_session(self, session_store, db_session):
        languages = ["en", "es", "fr", "de", "it", "pt", "nl", "sv"]

        results = await asyncio.gather(
            *(session_store.create_or_get("race", language) for language in languages)
        )

        assert len({s.id for s in results}) == 1
        assert len({s.language for s in results}) == 1
        assert results[0].language in languages
        assert len({s.started_at for s in results}) == 1

        count = await db_session.scalar(
            select(func.count(Session.id)).where(Session.session_id == "race")
        )
        assert count == 1

    async def test_storage_failure_raises_storage_error(self, mock_session_maker, mock_db):
        mock_db.commit.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))
        store = SessionStore(mock_session_maker)

        with pytest.raises(StorageError) as exc_info:
            await store.create_or_get("s-1", "en")

        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestGet:
    async def test_get_existing(self, session_store):
        await session_store.create_or_get("s-1", "en")

        session = await session_store.get("s-1")

        assert session.session_id == "s-1"

    async def test_get_missing_raises_not_found(self, session_store):
        with pytest.raises(SessionNotFoundError) as exc_info:
            await session_store.get("missing")

        assert exc_info.value.session_id == "missing"
        assert str(exc_info.value) == "Session missing not found"

    async def test_exists(self, session_store):
        await session_store.create_or_get("s-1", "en")

        assert await session_store.exists("s-1") is True
        assert await session_store.exists("s-2") is False

    async def test_get_storage_failure(self, mock_session_maker, mock_db):
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        store = SessionStore(mock_session_maker)

        with pytest.raises(StorageError):
            await store.get("s-1")


class TestComplete:
    """Completion fixes ended_at on the first call (first-call-wins)."""

    async def test_complete_sets_status_and_ended_at(self, session_store):
        await session_store.create_or_get("s-1", "en")

        session = await session_store.complete("s-1")

        assert session.status == SessionStatus.COMPLETED.value
        assert session.ended_at is not None
        assert session.ended_at >= session.started_at

    async def test_repeat_complete_keeps_first_ended_at(self, session_store):
        await session_store.create_or_get("s-1", "en")

        first = await session_store.complete("s-1")
        await asyncio.sleep(0.01)
        second = await session_store.complete("s-1")

        assert second.status == SessionStatus.COMPLETED.value
        assert second.ended_at == first.ended_at
        assert second.updated_at == first.updated_at

    async def test_complete_does_not_touch_creation_fields(self, session_store):
        created = await session_store.create_or_get("s-1", "en")

        completed = await session_store.complete("s-1")

        assert completed.started_at == created.started_at
        assert completed.language == "en"

    async def test_create_after_complete_returns_completed_session(self, session_store):
        await session_store.create_or_get("s-1", "en")
        completed = await session_store.complete("s-1")

        again = await session_store.create_or_get("s-1", "en")

        assert again.status == SessionStatus.COMPLETED.value
        assert again.ended_at == completed.ended_at

    async def test_complete_missing_raises_not_found(self, session_store):
        with pytest.raises(SessionNotFoundError):
            await session_store.complete("missing")

    async def test_concurrent_completes_agree(self, session_store):
        await session_store.create_or_get("s-1", "en")

        results = await asyncio.gather(*(session_store.complete("s-1") for _ in range(5)))

        assert len({s.ended_at for s in results}) == 1
