from collections.abc import Callable
from datetime import timedelta
from uuid import UUID

import structlog

from hoaxify.core.modules.session.generator import random_token
from hoaxify.core.modules.session.models import MAX_TOKEN_ATTEMPTS, SESSION_TTL, TOKEN_LENGTH, AuthToken, Session
from hoaxify.core.modules.session.store import DuplicateTokenError, TokenStore
from hoaxify.errors import InvalidTokenError, TokenExpiredError, TokenGenerationError
from hoaxify.utils import Clock, now

logger = structlog.get_logger(__name__)


class SessionManager:
    """Opaque session tokens with a sliding expiration window.

    A session moves from active to expired once ``ttl`` passes without a
    successful verification, and is deleted by logout, by revoking all of its
    user's sessions, or by the sweep. Verification only observes expiry; it
    never deletes.
    """

    def __init__(
        self,
        store: TokenStore,
        clock: Clock = now,
        ttl: timedelta = SESSION_TTL,
        token_length: int = TOKEN_LENGTH,
        max_attempts: int = MAX_TOKEN_ATTEMPTS,
        generate: Callable[[int], str] = random_token,
    ) -> None:
        self._store = store
        self._clock = clock
        self._generate = generate
        self.ttl = ttl
        self.token_length = token_length
        self.max_attempts = max_attempts

    async def create_session(self, user_id: UUID) -> AuthToken:
        """Mint and persist a token for an already authenticated user."""
        for attempt in range(1, self.max_attempts + 1):
            token = AuthToken(self._generate(self.token_length))
            try:
                await self._store.insert(Session(token=token, user_id=user_id, last_used_at=self._clock()))
            except DuplicateTokenError:
                logger.warning("session_token_collision", user_id=user_id, attempt=attempt)
                continue
            logger.debug("session_created", user_id=user_id)
            return token

        raise TokenGenerationError(f"Could not mint a unique session token in {self.max_attempts} attempts")

    async def verify_and_touch(self, token: str) -> UUID:
        """Return the owner of a valid token and restart its expiration window.

        Raises:
            InvalidTokenError: Token is unknown, or was deleted while being touched
            TokenExpiredError: Token is stored but its window has elapsed
        """
        started = self._clock()
        session = await self._store.find_by_token(token)
        if session is None:
            raise InvalidTokenError
        if session.is_expired(started, self.ttl):
            raise TokenExpiredError

        session.last_used_at = started
        if not await self._store.save(session):
            # Revoked or swept between the read and the write
            raise InvalidTokenError
        return session.user_id

    async def revoke(self, token: str) -> None:
        await self._store.delete_by_token(token)

    async def revoke_all(self, user_id: UUID) -> int:
        """Delete every session of a user, returning how many were removed."""
        deleted = await self._store.delete_all_for_user(user_id)
        logger.info("sessions_revoked", user_id=user_id, count=deleted)
        return deleted

    async def sweep(self) -> int:
        """Delete sessions whose window elapsed, returning how many were removed."""
        deleted = await self._store.delete_older_than(self._clock() - self.ttl)
        logger.debug("session_sweep_completed", deleted=deleted)
        return deleted
