from datetime import datetime
from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, Field

from hoaxify.core.db import MongoModel
from hoaxify.utils import now


class Attachment(MongoModel):
    """Uploaded file, optionally claimed by a hoax."""

    user_id: UUID | None = None  # Uploader, when the upload was authenticated
    hoax_id: UUID | None = None

    filename: str  # Original filename from user
    size: int  # File size in bytes
    mime_type: str  # Content type (e.g., "image/png")

    uploaded_at: datetime = Field(default_factory=now)


class AttachmentFileInfo(BaseModel):
    """Information about an attachment file for download."""

    file_path: Path = Field(..., description="Absolute path to file on disk")
    filename: str = Field(..., description="Original filename")
    mime_type: str = Field(..., description="MIME type")
