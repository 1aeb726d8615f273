from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from hoaxify.config import Config
from hoaxify.core.core import Core
from hoaxify.core.modules.attachment.models import Attachment, AttachmentFileInfo
from hoaxify.core.modules.hoax.models import HoaxView
from hoaxify.core.modules.session.models import AuthToken, Identity
from hoaxify.core.modules.user.models import User, UserView
from hoaxify.core.pagination import PageRequest, PageResult


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication ===
    async def resolve_identity(self, auth_token: str | None) -> Identity | None:
        """Verify a presented token and refresh its session; None when it does not authenticate anyone."""
        return await self._core.services.session.resolve_identity(auth_token)

    async def login(self, email: str, password: str) -> tuple[User, AuthToken]:
        """Check credentials and open a new session."""
        user = await self._core.services.user.authenticate(email, password)
        token = await self._core.services.session.create_session(user.id)
        return user, token

    async def logout(self, auth_token: str | None) -> None:
        """Revoke the presented token; logging out without a valid token is not an error."""
        if auth_token:
            await self._core.services.session.invalidate_session(auth_token)

    # === Users ===
    async def register(self, username: str | None, email: str | None, password: str | None) -> None:
        await self._core.services.user.register(username, email, password)

    async def activate(self, activation_token: str) -> None:
        await self._core.services.user.activate(activation_token)

    async def get_users(self, page: PageRequest) -> PageResult[UserView]:
        result = await self._core.services.user.list_active_users(page)
        return PageResult(
            content=[UserView.from_domain(user) for user in result.content],
            page=result.page,
            size=result.size,
            total_pages=result.total_pages,
        )

    async def get_user(self, user_id: UUID) -> UserView:
        return UserView.from_domain(await self._core.services.user.get_active_user(user_id))

    async def update_user(self, identity: Identity | None, user_id: UUID, username: str) -> UserView:
        """Rename own account (owner only)."""
        self._core.services.access.ensure_account_owner(identity, user_id)
        user = await self._core.services.user.update_username(user_id, username)
        return UserView.from_domain(user)

    async def delete_user(self, identity: Identity | None, user_id: UUID) -> None:
        """Delete own account with its sessions, hoaxes and attachments (owner only)."""
        self._core.services.access.ensure_account_owner(identity, user_id)

        # Sessions first so the account cannot be used while its content is removed
        await self._core.services.session.invalidate_user_sessions(user_id)
        await self._core.services.hoax.delete_hoaxes_by_user(user_id)
        await self._core.services.attachment.delete_user_attachments(user_id)
        await self._core.services.user.delete_user(user_id)

    async def request_password_reset(self, email: str) -> None:
        await self._core.services.user.request_password_reset(email)

    async def reset_password(self, reset_token: str, password: str) -> None:
        """Set a new password and log the account out everywhere."""
        user = await self._core.services.user.reset_password(reset_token, password)
        await self._core.services.session.invalidate_user_sessions(user.id)

    # === Hoaxes ===
    async def get_hoaxes(self, page: PageRequest) -> PageResult[HoaxView]:
        return await self._core.services.hoax.list_hoaxes(page)

    async def get_user_hoaxes(self, user_id: UUID, page: PageRequest) -> PageResult[HoaxView]:
        await self._core.services.user.get_active_user(user_id)
        return await self._core.services.hoax.list_hoaxes(page, user_id)

    async def create_hoax(self, identity: Identity | None, content: str | None, attachment_id: UUID | None) -> None:
        """Publish a hoax as the current user (authenticated only)."""
        current_user = self._core.services.access.ensure_authenticated(identity)
        await self._core.services.hoax.create_hoax(current_user.id, content, attachment_id)

    async def delete_hoax(self, identity: Identity | None, hoax_id: UUID) -> None:
        """Delete a hoax and its attachment (author only)."""
        hoax = await self._core.services.hoax.get_hoax(hoax_id)
        self._core.services.access.ensure_author(identity, hoax.user_id)
        await self._core.services.hoax.delete_hoax(hoax.id)

    # === Attachments ===
    async def upload_attachment(self, identity: Identity | None, filename: str, content: bytes, mime_type: str) -> Attachment:
        user_id = identity.user.id if identity is not None else None
        return await self._core.services.attachment.create_attachment(user_id, filename, content, mime_type)

    async def get_attachment_file(self, attachment_id: UUID) -> AttachmentFileInfo:
        return await self._core.services.attachment.get_attachment_file_info(attachment_id)
