"""Tests for the session token lifecycle."""

from datetime import timedelta
from uuid import uuid4

import pytest

from hoaxify.core.modules.session.manager import SessionManager
from hoaxify.core.modules.session.models import SESSION_TTL, TOKEN_LENGTH, Session
from hoaxify.errors import InvalidTokenError, TokenExpiredError, TokenGenerationError

ONE_MS = timedelta(milliseconds=1)


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_token_has_configured_length_and_verifies(self, session_manager):
        user_id = uuid4()

        token = await session_manager.create_session(user_id)

        assert len(token) == TOKEN_LENGTH
        assert await session_manager.verify_and_touch(token) == user_id

    @pytest.mark.asyncio
    async def test_session_persisted_with_creation_time(self, session_manager, token_store, clock):
        user_id = uuid4()

        token = await session_manager.create_session(user_id)

        stored = token_store.sessions[token]
        assert stored.user_id == user_id
        assert stored.last_used_at == clock()

    @pytest.mark.asyncio
    async def test_custom_token_length(self, token_store, clock):
        manager = SessionManager(token_store, clock=clock, token_length=48)

        token = await manager.create_session(uuid4())

        assert len(token) == 48

    @pytest.mark.asyncio
    async def test_collision_is_retried(self, token_store, clock):
        existing = Session(token="taken", user_id=uuid4(), last_used_at=clock())
        await token_store.insert(existing)
        candidates = iter(["taken", "taken", "fresh"])
        manager = SessionManager(token_store, clock=clock, generate=lambda _length: next(candidates))
        user_id = uuid4()

        token = await manager.create_session(user_id)

        assert token == "fresh"
        assert token_store.sessions["taken"].user_id == existing.user_id
        assert token_store.sessions["fresh"].user_id == user_id

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise(self, token_store, clock):
        await token_store.insert(Session(token="taken", user_id=uuid4(), last_used_at=clock()))
        calls = []

        def generate(length):
            calls.append(length)
            return "taken"

        manager = SessionManager(token_store, clock=clock, max_attempts=3, generate=generate)

        with pytest.raises(TokenGenerationError):
            await manager.create_session(uuid4())
        assert len(calls) == 3
        assert len(token_store.sessions) == 1


class TestVerifyAndTouch:
    @pytest.mark.asyncio
    async def test_unknown_token_is_invalid(self, session_manager):
        with pytest.raises(InvalidTokenError):
            await session_manager.verify_and_touch("no-such-token")

    @pytest.mark.asyncio
    async def test_expired_after_ttl(self, session_manager, clock):
        token = await session_manager.create_session(uuid4())
        await session_manager.verify_and_touch(token)

        clock.advance(SESSION_TTL + ONE_MS)

        with pytest.raises(TokenExpiredError):
            await session_manager.verify_and_touch(token)

    @pytest.mark.asyncio
    async def test_expired_token_is_not_deleted(self, session_manager, token_store, clock):
        token = await session_manager.create_session(uuid4())
        clock.advance(SESSION_TTL + timedelta(days=1))

        with pytest.raises(TokenExpiredError):
            await session_manager.verify_and_touch(token)

        assert token in token_store.sessions

    @pytest.mark.asyncio
    async def test_exactly_ttl_old_is_expired(self, session_manager, clock):
        token = await session_manager.create_session(uuid4())

        clock.advance(SESSION_TTL)

        with pytest.raises(TokenExpiredError):
            await session_manager.verify_and_touch(token)

    @pytest.mark.asyncio
    async def test_just_under_ttl_is_valid(self, session_manager, clock):
        user_id = uuid4()
        token = await session_manager.create_session(user_id)

        clock.advance(SESSION_TTL - ONE_MS)

        assert await session_manager.verify_and_touch(token) == user_id

    @pytest.mark.asyncio
    async def test_verification_refreshes_last_used_at(self, session_manager, token_store, clock):
        token = await session_manager.create_session(uuid4())
        clock.advance(timedelta(hours=3))
        started = clock()

        await session_manager.verify_and_touch(token)

        assert token_store.sessions[token].last_used_at >= started

    @pytest.mark.asyncio
    async def test_refresh_extends_life_beyond_original_ttl(self, session_manager, token_store, clock):
        user_id = uuid4()
        almost = SESSION_TTL - timedelta(seconds=1)
        token = "sliding"
        await token_store.insert(Session(token=token, user_id=user_id, last_used_at=clock() - almost))

        assert await session_manager.verify_and_touch(token) == user_id
        clock.advance(almost)

        assert await session_manager.verify_and_touch(token) == user_id

    @pytest.mark.asyncio
    async def test_touch_after_concurrent_revoke_does_not_resurrect(self, session_manager, token_store):
        token = await session_manager.create_session(uuid4())
        original_find = token_store.find_by_token

        async def find_then_revoke(value):
            session = await original_find(value)
            await session_manager.revoke(value)
            return session

        token_store.find_by_token = find_then_revoke

        with pytest.raises(InvalidTokenError):
            await session_manager.verify_and_touch(token)
        assert token not in token_store.sessions


class TestRevoke:
    @pytest.mark.asyncio
    async def test_revoke_is_idempotent(self, session_manager, token_store):
        token = await session_manager.create_session(uuid4())

        await session_manager.revoke(token)
        await session_manager.revoke(token)

        assert token not in token_store.sessions
        with pytest.raises(InvalidTokenError):
            await session_manager.verify_and_touch(token)

    @pytest.mark.asyncio
    async def test_revoke_all_removes_only_that_users_sessions(self, session_manager, token_store):
        user_id, other_user_id = uuid4(), uuid4()
        tokens = [await session_manager.create_session(user_id) for _ in range(3)]
        other_token = await session_manager.create_session(other_user_id)

        deleted = await session_manager.revoke_all(user_id)

        assert deleted == 3
        assert all(token not in token_store.sessions for token in tokens)
        assert await session_manager.verify_and_touch(other_token) == other_user_id

    @pytest.mark.asyncio
    async def test_revoke_all_without_sessions(self, session_manager):
        assert await session_manager.revoke_all(uuid4()) == 0


class TestSweep:
    @pytest.mark.asyncio
    async def test_sweep_without_expired_rows_is_noop(self, session_manager, token_store):
        token = await session_manager.create_session(uuid4())

        assert await session_manager.sweep() == 0
        assert token in token_store.sessions

    @pytest.mark.asyncio
    async def test_sweep_on_empty_store(self, session_manager):
        assert await session_manager.sweep() == 0

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired(self, session_manager, token_store, clock):
        stale = await session_manager.create_session(uuid4())
        clock.advance(timedelta(days=5))
        fresh = await session_manager.create_session(uuid4())
        clock.advance(timedelta(days=3))

        assert await session_manager.sweep() == 1
        assert stale not in token_store.sessions
        assert fresh in token_store.sessions


class TestScenarios:
    @pytest.mark.asyncio
    async def test_sliding_window_across_ten_days(self, session_manager, token_store, clock):
        user_id = uuid4()
        created_at = clock()
        token = await session_manager.create_session(user_id)

        clock.advance(timedelta(days=4))
        assert await session_manager.verify_and_touch(token) == user_id
        assert token_store.sessions[token].last_used_at == created_at + timedelta(days=4)

        clock.advance(timedelta(days=6))
        assert await session_manager.verify_and_touch(token) == user_id

    @pytest.mark.asyncio
    async def test_swept_token_becomes_invalid_not_expired(self, session_manager, token_store, clock):
        token = await session_manager.create_session(uuid4())

        await session_manager.sweep()
        assert token in token_store.sessions

        clock.advance(SESSION_TTL + timedelta(minutes=1))
        await session_manager.sweep()

        assert token not in token_store.sessions
        with pytest.raises(InvalidTokenError):
            await session_manager.verify_and_touch(token)
