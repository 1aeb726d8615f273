from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from hoaxify.core.core import Service
from hoaxify.core.modules.session.identity import resolve_identity
from hoaxify.core.modules.session.manager import SessionManager
from hoaxify.core.modules.session.models import AuthToken, Identity
from hoaxify.core.modules.session.store import MongoTokenStore
from hoaxify.core.modules.session.sweeper import PeriodicSweeper

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Mongo-backed session manager plus the periodic sweep of expired sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._store = MongoTokenStore(database.get_collection("sessions"))
        self._manager: SessionManager | None = None
        self._sweeper: PeriodicSweeper | None = None

    @property
    def manager(self) -> SessionManager:
        if self._manager is None:
            raise RuntimeError("Session service not started")
        return self._manager

    async def on_start(self) -> None:
        """Create indexes and start sweeping expired sessions."""
        config = self.core.config
        await self._store.create_indexes()
        self._manager = SessionManager(
            self._store,
            ttl=timedelta(seconds=config.session_ttl_seconds),
            token_length=config.session_token_length,
        )
        self._sweeper = PeriodicSweeper(self._manager.sweep, config.session_sweep_interval_seconds)
        self._sweeper.start()
        logger.debug("session_service_started", ttl_seconds=config.session_ttl_seconds)

    async def on_stop(self) -> None:
        if self._sweeper is not None:
            await self._sweeper.stop()

    async def create_session(self, user_id: UUID) -> AuthToken:
        return await self.manager.create_session(user_id)

    async def resolve_identity(self, token: str | None) -> Identity | None:
        return await resolve_identity(token, self.manager, self.core.services.user.find_user)

    async def invalidate_session(self, auth_token: str) -> None:
        await self.manager.revoke(auth_token)

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        return await self.manager.revoke_all(user_id)