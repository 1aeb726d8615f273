import re
from typing import cast

from hoaxify.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_PATTERN_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).*$")


def username_error(username: str | None) -> str | None:
    if not username:
        return "Username cannot be null"
    if not 4 <= len(username) <= 32:
        return "Username must have min 4 and max 32 characters"
    return None


def email_error(email: str | None) -> str | None:
    if not email:
        return "E-mail cannot be null"
    if not is_email(email):
        return "E-mail is not valid"
    return None


def password_error(password: str | None) -> str | None:
    if not password:
        return "Password cannot be null"
    if len(password) < 13:
        return "Password must be at least 13 characters long"
    if not PASSWORD_PATTERN_RE.match(password):
        return "Password must have at least 1 uppercase, 1 lowercase letter and 1 number"
    return None


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def validate_registration(username: str | None, email: str | None, password: str | None) -> tuple[str, str, str]:
    """Validate sign-up input, reporting every failing field at once.

    Returns:
        The username, e-mail and password, known to be present

    Raises:
        ValidationError: With ``field_errors`` keyed by field name
    """
    errors = {
        field: message
        for field, message in (
            ("username", username_error(username)),
            ("email", email_error(email)),
            ("password", password_error(password)),
        )
        if message is not None
    }
    if errors:
        raise ValidationError("Validation failure", field_errors=errors)
    return cast(str, username), cast(str, email), cast(str, password)


def validate_password(password: str | None) -> None:
    message = password_error(password)
    if message is not None:
        raise ValidationError("Validation failure", field_errors={"password": message})


def validate_username(username: str | None) -> None:
    message = username_error(username)
    if message is not None:
        raise ValidationError("Validation failure", field_errors={"username": message})
