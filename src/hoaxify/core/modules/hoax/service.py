from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from hoaxify.core.core import Service
from hoaxify.core.modules.hoax.models import AttachmentView, Hoax, HoaxView
from hoaxify.core.modules.hoax.validators import validate_hoax_content
from hoaxify.core.modules.user.models import UserView
from hoaxify.core.pagination import PageRequest, PageResult
from hoaxify.errors import NotFoundError
from hoaxify.utils import total_pages

logger = structlog.get_logger(__name__)


class HoaxService(Service):
    """Manages hoaxes and the paginated feeds built from them."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("hoaxes")

    async def on_start(self) -> None:
        """Create indexes for the global and per-user feeds."""
        await self._collection.create_index([("created_at", -1)])
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def get_hoax(self, hoax_id: UUID) -> Hoax:
        hoax = Hoax.from_mongo(await self._collection.find_one({"_id": hoax_id}))
        if hoax is None:
            raise NotFoundError(f"Hoax '{hoax_id}' not found")
        return hoax

    async def create_hoax(self, user_id: UUID, content: str | None, attachment_id: UUID | None = None) -> Hoax:
        hoax = Hoax(content=validate_hoax_content(content), user_id=user_id)
        # Claim first so an unknown or already used attachment leaves no hoax behind
        if attachment_id is not None:
            await self.core.services.attachment.attach_to_hoax(attachment_id, hoax.id)
        await self._collection.insert_one(hoax.to_mongo())
        logger.info("hoax_created", hoax_id=hoax.id, user_id=user_id)
        return hoax

    async def list_hoaxes(self, page: PageRequest, user_id: UUID | None = None) -> PageResult[HoaxView]:
        """Get a page of hoaxes, newest first, optionally limited to one author."""
        query: dict[str, Any] = {} if user_id is None else {"user_id": user_id}
        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort([("created_at", -1), ("_id", -1)]).skip(page.offset).limit(page.size)
        hoaxes = await Hoax.list_cursor(cursor)

        users = await self.core.services.user.get_users({hoax.user_id for hoax in hoaxes})
        attachments = await self.core.services.attachment.get_hoax_attachments([hoax.id for hoax in hoaxes])

        content = [
            HoaxView(
                id=hoax.id,
                content=hoax.content,
                created_at=hoax.created_at,
                user=UserView.from_domain(users[hoax.user_id]),
                attachment=AttachmentView.from_domain(attachments[hoax.id]) if hoax.id in attachments else None,
            )
            for hoax in hoaxes
            if hoax.user_id in users
        ]
        return PageResult(content=content, page=page.page, size=page.size, total_pages=total_pages(total, page.size))

    async def delete_hoax(self, hoax_id: UUID) -> None:
        await self.core.services.attachment.delete_hoax_attachments([hoax_id])
        await self._collection.delete_one({"_id": hoax_id})
        logger.info("hoax_deleted", hoax_id=hoax_id)

    async def delete_hoaxes_by_user(self, user_id: UUID) -> int:
        hoax_ids = await self._collection.distinct("_id", {"user_id": user_id})
        await self.core.services.attachment.delete_hoax_attachments(hoax_ids)
        result = await self._collection.delete_many({"user_id": user_id})
        logger.debug("user_hoaxes_deleted", user_id=user_id, count=result.deleted_count)
        return result.deleted_count
