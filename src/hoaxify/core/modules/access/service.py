from uuid import UUID

from hoaxify.core.core import Service
from hoaxify.core.modules.session.models import Identity
from hoaxify.core.modules.user.models import User
from hoaxify.errors import AccessDeniedError, AuthenticationError


class AccessService(Service):
    """Per-endpoint authorization decisions over the identity attached to a request."""

    def ensure_authenticated(self, identity: Identity | None) -> User:
        """Return the caller, raising AuthenticationError for anonymous requests."""
        if identity is None:
            raise AuthenticationError("Unauthorized")
        return identity.user

    def ensure_account_owner(self, identity: Identity | None, user_id: UUID) -> User:
        """Ensure the caller owns the account; anonymous callers are denied as well."""
        if identity is None or identity.user.id != user_id:
            raise AccessDeniedError("You are not authorized to update or delete this user")
        return identity.user

    def ensure_author(self, identity: Identity | None, author_id: UUID) -> User:
        if identity is None or identity.user.id != author_id:
            raise AccessDeniedError("You are not authorized to delete this hoax")
        return identity.user
