from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from hoaxify.core.core import Service
from hoaxify.core.modules.session.generator import random_token
from hoaxify.core.modules.user.models import User
from hoaxify.core.modules.user.validators import is_email, validate_password, validate_registration, validate_username
from hoaxify.core.pagination import PageRequest, PageResult
from hoaxify.errors import AccessDeniedError, AuthenticationError, MailDeliveryError, NotFoundError, ValidationError
from hoaxify.utils import total_pages

logger = structlog.get_logger(__name__)

ACCOUNT_TOKEN_LENGTH = 16


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _email_in_use() -> ValidationError:
    return ValidationError("Validation failure", field_errors={"email": "E-mail in use"})


class UserService(Service):
    """Manages user accounts: sign-up, activation, credentials and password reset."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("activation_token", 1)], sparse=True)
        await self._collection.create_index([("password_reset_token", 1)], sparse=True)
        logger.debug("user_service_started")

    async def find_user(self, user_id: UUID) -> User | None:
        return User.from_mongo(await self._collection.find_one({"_id": user_id}))

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID, raising NotFoundError when missing."""
        user = await self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def get_active_user(self, user_id: UUID) -> User:
        user = await self.find_user(user_id)
        if user is None or user.inactive:
            raise NotFoundError("User not found")
        return user

    async def get_users(self, user_ids: set[UUID]) -> dict[UUID, User]:
        """Load several users at once, skipping ids that no longer exist."""
        users = await User.list_cursor(self._collection.find({"_id": {"$in": list(user_ids)}}))
        return {user.id: user for user in users}

    async def find_by_email(self, email: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"email": email}))

    async def list_active_users(self, page: PageRequest) -> PageResult[User]:
        query = {"inactive": False}
        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort("username", 1).skip(page.offset).limit(page.size)
        users = await User.list_cursor(cursor)
        return PageResult(content=users, page=page.page, size=page.size, total_pages=total_pages(total, page.size))

    async def register(self, username: str | None, email: str | None, password: str | None) -> User:
        """Create an inactive user and mail its activation token.

        The user is removed again when the activation mail cannot be sent.
        """
        username, email, password = validate_registration(username, email, password)
        if await self.find_by_email(email) is not None:
            raise _email_in_use()

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            activation_token=random_token(ACCOUNT_TOKEN_LENGTH),
        )
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise _email_in_use() from e

        try:
            await self.core.services.mail.send_account_activation(user.email, user.activation_token or "")
        except MailDeliveryError:
            await self._collection.delete_one({"_id": user.id})
            logger.warning("registration_rolled_back", user_id=user.id)
            raise

        logger.info("user_registered", user_id=user.id)
        return user

    async def activate(self, activation_token: str) -> None:
        result = await self._collection.update_one(
            {"activation_token": activation_token},
            {"$set": {"inactive": False, "activation_token": None}},
        )
        if result.matched_count == 0:
            raise ValidationError("This account is either active or the token is invalid")
        logger.info("user_activated")

    async def authenticate(self, email: str, password: str) -> User:
        """Check login credentials.

        Raises:
            AuthenticationError: Malformed e-mail, unknown account or wrong password
            AccessDeniedError: Credentials match an account that is not activated
        """
        if not is_email(email):
            raise AuthenticationError("Incorrect credentials")
        user = await self.find_by_email(email)
        if user is None or not check_password(password, user.password_hash):
            raise AuthenticationError("Incorrect credentials")
        if user.inactive:
            raise AccessDeniedError("Account is inactive")
        return user

    async def update_username(self, user_id: UUID, username: str) -> User:
        validate_username(username)
        await self._collection.update_one({"_id": user_id}, {"$set": {"username": username}})
        return await self.get_user(user_id)

    async def delete_user(self, user_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")
        logger.info("user_deleted", user_id=user_id)

    async def request_password_reset(self, email: str) -> None:
        user = await self.find_by_email(email)
        if user is None:
            raise NotFoundError("E-mail not found")

        reset_token = random_token(ACCOUNT_TOKEN_LENGTH)
        await self._collection.update_one({"_id": user.id}, {"$set": {"password_reset_token": reset_token}})
        await self.core.services.mail.send_password_reset(user.email, reset_token)
        logger.info("password_reset_requested", user_id=user.id)

    async def reset_password(self, reset_token: str, password: str) -> User:
        """Set a new password for the holder of a reset token and activate the account."""
        user = User.from_mongo(await self._collection.find_one({"password_reset_token": reset_token}))
        if user is None:
            raise AccessDeniedError("You are not authorized to update your password. Please follow the password reset steps again.")
        validate_password(password)

        await self._collection.update_one(
            {"_id": user.id},
            {
                "$set": {
                    "password_hash": hash_password(password),
                    "password_reset_token": None,
                    "inactive": False,
                    "activation_token": None,
                }
            },
        )
        logger.info("password_reset_completed", user_id=user.id)
        return user
