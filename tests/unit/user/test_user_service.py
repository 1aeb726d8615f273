"""Tests for registration and credential checks."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from hoaxify.core.modules.user.models import User
from hoaxify.core.modules.user.service import UserService, hash_password
from hoaxify.errors import AccessDeniedError, AuthenticationError, MailDeliveryError, ValidationError

PASSWORD = "P4ssword12345"


@pytest.fixture
def users_collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def mail():
    return SimpleNamespace(send_account_activation=AsyncMock(), send_password_reset=AsyncMock())


@pytest.fixture
def user_service(users_collection, mail):
    database = MagicMock()
    database.get_collection.return_value = users_collection
    service = UserService(database)
    service.set_core(SimpleNamespace(services=SimpleNamespace(mail=mail)))
    return service


def stored_user(inactive: bool) -> User:
    return User(username="user1", email="user1@mail.com", password_hash=hash_password(PASSWORD), inactive=inactive)


class TestRegister:
    @pytest.mark.asyncio
    async def test_inactive_user_stored_and_mailed(self, user_service, users_collection, mail):
        user = await user_service.register("user1", "user1@mail.com", PASSWORD)

        assert user.inactive
        users_collection.insert_one.assert_awaited_once()
        mail.send_account_activation.assert_awaited_once_with("user1@mail.com", user.activation_token)

    @pytest.mark.asyncio
    async def test_invalid_input_reports_every_field(self, user_service, users_collection):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.register(None, "not-an-email", "short")

        assert set(exc_info.value.field_errors) == {"username", "email", "password"}
        users_collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_known_email_rejected(self, user_service, users_collection):
        users_collection.find_one.return_value = stored_user(inactive=False).to_mongo()

        with pytest.raises(ValidationError) as exc_info:
            await user_service.register("user2", "user1@mail.com", PASSWORD)

        assert exc_info.value.field_errors == {"email": "E-mail in use"}
        users_collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_signup_with_same_email_rejected(self, user_service, users_collection, mail):
        users_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error collection: users")

        with pytest.raises(ValidationError) as exc_info:
            await user_service.register("user1", "user1@mail.com", PASSWORD)

        assert exc_info.value.field_errors == {"email": "E-mail in use"}
        mail.send_account_activation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mail_failure_removes_user(self, user_service, users_collection, mail):
        mail.send_account_activation.side_effect = MailDeliveryError()

        with pytest.raises(MailDeliveryError):
            await user_service.register("user1", "user1@mail.com", PASSWORD)

        inserted = users_collection.insert_one.await_args.args[0]
        users_collection.delete_one.assert_awaited_once_with({"_id": inserted["_id"]})


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_active_user_with_correct_password(self, user_service, users_collection):
        user = stored_user(inactive=False)
        users_collection.find_one.return_value = user.to_mongo()

        assert (await user_service.authenticate("user1@mail.com", PASSWORD)).id == user.id

    @pytest.mark.asyncio
    async def test_unknown_email(self, user_service):
        with pytest.raises(AuthenticationError):
            await user_service.authenticate("nobody@mail.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_wrong_password(self, user_service, users_collection):
        users_collection.find_one.return_value = stored_user(inactive=False).to_mongo()

        with pytest.raises(AuthenticationError):
            await user_service.authenticate("user1@mail.com", "Wr0ngPassword99")

    @pytest.mark.asyncio
    async def test_malformed_email_skips_lookup(self, user_service, users_collection):
        with pytest.raises(AuthenticationError):
            await user_service.authenticate("user1-at-mail", PASSWORD)

        users_collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_account_is_denied(self, user_service, users_collection):
        users_collection.find_one.return_value = stored_user(inactive=True).to_mongo()

        with pytest.raises(AccessDeniedError):
            await user_service.authenticate("user1@mail.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_inactive_account_with_wrong_password_is_unauthenticated(self, user_service, users_collection):
        users_collection.find_one.return_value = stored_user(inactive=True).to_mongo()

        with pytest.raises(AuthenticationError):
            await user_service.authenticate("user1@mail.com", "Wr0ngPassword99")
