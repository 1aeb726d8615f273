"""Persistence for session records."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any
from uuid import UUID

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from hoaxify.core.modules.session.models import Session


class DuplicateTokenError(Exception):
    """Raised when inserting a session whose token is already stored."""


class TokenStore(ABC):
    """Repository of sessions keyed by token.

    Implementations must be safe to share between concurrent request handlers
    and the periodic sweep. Every operation touches rows individually or in a
    single bulk statement; callers rely on nothing stronger.
    """

    @abstractmethod
    async def insert(self, session: Session) -> None:
        """Persist a new session, raising DuplicateTokenError on a token clash."""

    @abstractmethod
    async def find_by_token(self, token: str) -> Session | None: ...

    @abstractmethod
    async def save(self, session: Session) -> bool:
        """Write back mutable fields of an existing session.

        Never creates a row. Returns False when the session is gone.
        """

    @abstractmethod
    async def delete_by_token(self, token: str) -> None: ...

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int: ...

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete sessions last used strictly before ``cutoff``."""


class MongoTokenStore(TokenStore):
    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    async def create_indexes(self) -> None:
        await self._collection.create_index([("token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("last_used_at", 1)])

    async def insert(self, session: Session) -> None:
        try:
            await self._collection.insert_one(session.to_mongo())
        except DuplicateKeyError as e:
            raise DuplicateTokenError from e

    async def find_by_token(self, token: str) -> Session | None:
        return Session.from_mongo(await self._collection.find_one({"token": token}))

    async def save(self, session: Session) -> bool:
        # No upsert: a row deleted by logout or the sweep must stay deleted
        result = await self._collection.update_one(
            {"token": session.token}, {"$set": {"last_used_at": session.last_used_at}}
        )
        return result.matched_count > 0

    async def delete_by_token(self, token: str) -> None:
        await self._collection.delete_one({"token": token})

    async def delete_all_for_user(self, user_id: UUID) -> int:
        result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self._collection.delete_many({"last_used_at": {"$lt": cutoff}})
        return result.deleted_count
