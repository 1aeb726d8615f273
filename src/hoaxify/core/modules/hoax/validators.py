from hoaxify.core.modules.hoax.models import MAX_CONTENT_LENGTH, MIN_CONTENT_LENGTH
from hoaxify.errors import ValidationError


def validate_hoax_content(content: str | None) -> str:
    """Return the content if it fits the allowed length, otherwise raise ValidationError."""
    if content is None or not MIN_CONTENT_LENGTH <= len(content) <= MAX_CONTENT_LENGTH:
        raise ValidationError(
            "Validation failure",
            field_errors={"content": f"Hoax must be {MIN_CONTENT_LENGTH} to {MAX_CONTENT_LENGTH} characters long"},
        )
    return content
