from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    cors_origins: list[str] = []
    attachments_path: str  # Directory path for storing hoax attachments
    # Session lifecycle
    session_ttl_seconds: int = 7 * 24 * 60 * 60  # Sliding window measured from last use
    session_token_length: int = 32
    session_sweep_interval_seconds: float = 60 * 60
    # Outgoing mail; delivery is disabled when smtp_host is unset
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from: str = "Hoaxify <info@hoaxify.local>"
    smtp_starttls: bool = True

    model_config = {
        "env_file": [".env"],
        "env_prefix": "HOAXIFY_",
        "extra": "ignore",
    }
