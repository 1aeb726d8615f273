"""File storage operations for attachments."""

from pathlib import Path
from uuid import UUID

from hoaxify.core.modules.attachment.utils import get_attachment_storage_name


def get_attachment_file_path(attachments_path: str, attachment_id: UUID, filename: str) -> Path:
    return Path(attachments_path) / get_attachment_storage_name(attachment_id, filename)


def write_attachment_file(attachments_path: str, attachment_id: UUID, filename: str, content: bytes) -> Path:
    file_path = get_attachment_file_path(attachments_path, attachment_id, filename)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    return file_path


def delete_attachment_file(attachments_path: str, attachment_id: UUID, filename: str) -> bool:
    """Remove an attachment file, returning False if it was already gone."""
    file_path = get_attachment_file_path(attachments_path, attachment_id, filename)
    try:
        file_path.unlink()
    except FileNotFoundError:
        return False
    return True
