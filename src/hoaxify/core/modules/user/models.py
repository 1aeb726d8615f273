from uuid import UUID

from pydantic import BaseModel, Field

from hoaxify.core.db import MongoModel


class User(MongoModel):
    """User domain model with credentials and account state."""

    username: str
    email: str
    password_hash: str  # bcrypt hash
    inactive: bool = True  # Cleared by email activation or a completed password reset
    activation_token: str | None = None
    password_reset_token: str | None = None


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="E-mail address")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, username=user.username, email=user.email)
