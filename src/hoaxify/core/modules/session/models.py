"""Session management models."""

from datetime import datetime, timedelta
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from hoaxify.core.db import MongoModel
from hoaxify.core.modules.user.models import User
from hoaxify.utils import now

AuthToken = NewType("AuthToken", str)

SESSION_TTL = timedelta(days=7)
TOKEN_LENGTH = 32
MAX_TOKEN_ATTEMPTS = 5


class Session(MongoModel):
    """Opaque-token session owned by a single user.

    Indexed on token - unique, user_id, last_used_at (sweep range scans).
    """

    token: str
    user_id: UUID
    last_used_at: datetime = Field(default_factory=now)

    def is_expired(self, at: datetime, ttl: timedelta) -> bool:
        """A session stays valid while strictly less than ``ttl`` has passed since its last use."""
        return at - self.last_used_at >= ttl


class Identity(BaseModel):
    """Authenticated caller attached to a request."""

    user: User
    token: AuthToken

    model_config = ConfigDict(frozen=True)
