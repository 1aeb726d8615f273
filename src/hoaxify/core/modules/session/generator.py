import secrets
import string

TOKEN_ALPHABET = string.ascii_letters + string.digits


def random_token(length: int) -> str:
    """Return an opaque token of exactly ``length`` characters drawn from the OS CSPRNG."""
    if length < 1:
        raise ValueError(f"Token length must be positive, got {length}")
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
