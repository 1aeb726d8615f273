import asyncio
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from hoaxify.core.core import Service
from hoaxify.core.modules.attachment.models import Attachment, AttachmentFileInfo
from hoaxify.core.modules.attachment.storage import delete_attachment_file, get_attachment_file_path, write_attachment_file
from hoaxify.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

MAX_ATTACHMENT_SIZE = 5 * 1024 * 1024


class AttachmentService(Service):
    """Stores uploaded files on disk with their metadata in MongoDB."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("attachments")

    async def on_start(self) -> None:
        await self._collection.create_index([("hoax_id", 1)])
        await self._collection.create_index([("user_id", 1)])

    async def get_attachment(self, attachment_id: UUID) -> Attachment:
        attachment = Attachment.from_mongo(await self._collection.find_one({"_id": attachment_id}))
        if attachment is None:
            raise NotFoundError(f"Attachment not found: {attachment_id}")
        return attachment

    async def create_attachment(self, user_id: UUID | None, filename: str, content: bytes, mime_type: str) -> Attachment:
        """Save an uploaded file; it stays unclaimed until a hoax references it."""
        if len(content) > MAX_ATTACHMENT_SIZE:
            raise ValidationError("Validation failure", field_errors={"file": "Uploaded file cannot be bigger than 5MB"})

        attachment = Attachment(user_id=user_id, filename=filename, size=len(content), mime_type=mime_type)
        await asyncio.to_thread(
            write_attachment_file, self.core.config.attachments_path, attachment.id, attachment.filename, content
        )
        await self._collection.insert_one(attachment.to_mongo())
        logger.debug("attachment_created", attachment_id=attachment.id, size=attachment.size)
        return attachment

    async def attach_to_hoax(self, attachment_id: UUID, hoax_id: UUID) -> Attachment:
        """Claim an unclaimed attachment for a hoax.

        Raises:
            NotFoundError: If attachment not found
            ValidationError: If another hoax already claimed it
        """
        result = await self._collection.update_one(
            {"_id": attachment_id, "hoax_id": None}, {"$set": {"hoax_id": hoax_id}}
        )
        if result.matched_count == 0:
            attachment = await self.get_attachment(attachment_id)
            raise ValidationError(f"Attachment {attachment.id} is already attached to another hoax")
        return await self.get_attachment(attachment_id)

    async def get_attachment_file_info(self, attachment_id: UUID) -> AttachmentFileInfo:
        attachment = await self.get_attachment(attachment_id)
        file_path = get_attachment_file_path(self.core.config.attachments_path, attachment.id, attachment.filename)
        if not file_path.exists():
            raise NotFoundError(f"Attachment file not found: {attachment_id}")
        return AttachmentFileInfo(file_path=file_path, filename=attachment.filename, mime_type=attachment.mime_type)

    async def get_hoax_attachments(self, hoax_ids: list[UUID]) -> dict[UUID, Attachment]:
        """Map hoax id to its attachment for the given hoaxes."""
        cursor = self._collection.find({"hoax_id": {"$in": hoax_ids}})
        return {a.hoax_id: a for a in await Attachment.list_cursor(cursor) if a.hoax_id is not None}

    async def delete_attachments(self, query: dict[str, Any]) -> int:
        attachments = await Attachment.list_cursor(self._collection.find(query))
        for attachment in attachments:
            await asyncio.to_thread(
                delete_attachment_file, self.core.config.attachments_path, attachment.id, attachment.filename
            )
        result = await self._collection.delete_many({"_id": {"$in": [a.id for a in attachments]}})
        logger.debug("attachments_deleted", count=result.deleted_count)
        return result.deleted_count

    async def delete_hoax_attachments(self, hoax_ids: list[UUID]) -> int:
        return await self.delete_attachments({"hoax_id": {"$in": hoax_ids}})

    async def delete_user_attachments(self, user_id: UUID) -> int:
        """Delete files uploaded by a user, including ones never claimed by a hoax."""
        return await self.delete_attachments({"user_id": user_id})
