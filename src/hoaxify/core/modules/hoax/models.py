from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from hoaxify.core.db import MongoModel
from hoaxify.core.modules.attachment.models import Attachment
from hoaxify.core.modules.user.models import UserView
from hoaxify.utils import now

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 5000


class Hoax(MongoModel):
    """Short text post by a user."""

    content: str
    user_id: UUID
    created_at: datetime = Field(default_factory=now)


class AttachmentView(BaseModel):
    id: UUID = Field(..., description="Attachment ID")
    filename: str = Field(..., description="Original filename")
    mime_type: str = Field(..., description="MIME type")

    @classmethod
    def from_domain(cls, attachment: Attachment) -> "AttachmentView":
        return cls(id=attachment.id, filename=attachment.filename, mime_type=attachment.mime_type)


class HoaxView(BaseModel):
    """Hoax as listed in feeds, with its author and attachment."""

    id: UUID = Field(..., description="Hoax ID")
    content: str = Field(..., description="Hoax text")
    created_at: datetime = Field(..., description="Creation time")
    user: UserView = Field(..., description="Author")
    attachment: AttachmentView | None = Field(None, description="Attached file, if any")
