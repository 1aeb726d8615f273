"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from hoaxify.core.modules.session.manager import SessionManager
from hoaxify.core.modules.session.models import Session
from hoaxify.core.modules.session.store import DuplicateTokenError, TokenStore
from hoaxify.core.modules.user.models import User


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class InMemoryTokenStore(TokenStore):
    """Dict-backed token store with the same semantics as the Mongo one."""

    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}

    async def insert(self, session: Session) -> None:
        if session.token in self.sessions:
            raise DuplicateTokenError
        self.sessions[session.token] = session.model_copy()

    async def find_by_token(self, token: str) -> Session | None:
        session = self.sessions.get(token)
        return session.model_copy() if session else None

    async def save(self, session: Session) -> bool:
        if session.token not in self.sessions:
            return False
        self.sessions[session.token] = session.model_copy()
        return True

    async def delete_by_token(self, token: str) -> None:
        self.sessions.pop(token, None)

    async def delete_all_for_user(self, user_id: UUID) -> int:
        tokens = [token for token, session in self.sessions.items() if session.user_id == user_id]
        for token in tokens:
            del self.sessions[token]
        return len(tokens)

    async def delete_older_than(self, cutoff: datetime) -> int:
        tokens = [token for token, session in self.sessions.items() if session.last_used_at < cutoff]
        for token in tokens:
            del self.sessions[token]
        return len(tokens)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest.fixture
def session_manager(token_store, clock):
    return SessionManager(token_store, clock=clock)


@pytest.fixture
def mock_user():
    """Create an activated user for testing."""
    return User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        username="user1",
        email="user1@mail.com",
        password_hash="$2b$12$hashed_password_here",
        inactive=False,
    )
