from collections.abc import Awaitable, Callable
from uuid import UUID

from hoaxify.core.modules.session.manager import SessionManager
from hoaxify.core.modules.session.models import AuthToken, Identity
from hoaxify.core.modules.user.models import User
from hoaxify.errors import AuthenticationError


async def resolve_identity(
    token: str | None,
    sessions: SessionManager,
    load_user: Callable[[UUID], Awaitable[User | None]],
) -> Identity | None:
    """Best-effort identity lookup for a presented credential.

    Returns None for a missing, unknown or expired token and for a token whose
    user no longer exists. A valid token gets its window refreshed. Store
    failures propagate.
    """
    if not token:
        return None
    try:
        user_id = await sessions.verify_and_touch(token)
    except AuthenticationError:
        return None

    user = await load_user(user_id)
    if user is None:
        return None
    return Identity(user=user, token=AuthToken(token))

