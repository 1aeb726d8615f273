"""Filename handling for stored attachments."""

import re
from pathlib import Path
from uuid import UUID

MAX_FILENAME_LENGTH = 100


def get_attachment_storage_name(attachment_id: UUID, filename: str) -> str:
    """Name of the file on disk: attachment id plus a readable, sanitized filename."""
    return f"{attachment_id}__{sanitize_filename(filename)}"


def sanitize_filename(filename: str) -> str:
    """Make a user supplied filename safe to store on a Unix filesystem.

    Strips directory components and leading dots, replaces anything but word
    characters, spaces, dots and hyphens, and caps the length while keeping
    the extension.
    """
    filename = Path(filename).name.lstrip(".")

    sanitized = re.sub(r"[^\w\s.-]", "_", filename)
    sanitized = re.sub(r"_+", "_", sanitized)
    sanitized = re.sub(r"\s+", " ", sanitized)

    if len(sanitized) > MAX_FILENAME_LENGTH:
        name, dot, ext = sanitized.rpartition(".")
        if dot and name:
            keep = MAX_FILENAME_LENGTH - len(ext) - 1
            sanitized = f"{name[:keep]}.{ext}" if keep > 0 else sanitized[:MAX_FILENAME_LENGTH]
        else:
            sanitized = sanitized[:MAX_FILENAME_LENGTH]

    # Nothing meaningful left (only separators)
    if not re.sub(r"[\s._-]", "", sanitized):
        return "unnamed_file"
    return sanitized
