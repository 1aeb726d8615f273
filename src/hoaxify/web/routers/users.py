from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from hoaxify.core.modules.hoax.models import HoaxView
from hoaxify.core.modules.user.models import UserView
from hoaxify.core.pagination import PageRequest, PageResult
from hoaxify.web.deps import AppDep, IdentityDep
from hoaxify.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])

PageQuery = Annotated[str | None, Query(description="Zero-based page index")]
SizeQuery = Annotated[str | None, Query(description="Page size, 1 to 100")]


class MessageResponse(BaseModel):
    message: str = Field(..., description="Outcome of the operation")


class RegisterRequest(BaseModel):
    """Sign-up request; field rules are checked by the service to report all failures together."""

    username: str | None = Field(None, description="Username, 4 to 32 characters")
    email: str | None = Field(None, description="E-mail address, must be unused")
    password: str | None = Field(None, description="At least 13 characters with upper, lower case and a digit")


class UpdateUserRequest(BaseModel):
    username: str = Field(..., description="New username")


class PasswordResetRequest(BaseModel):
    email: str = Field(..., description="E-mail of the account to reset")


class PasswordUpdateRequest(BaseModel):
    password_reset_token: str = Field(..., description="Token received by e-mail")
    password: str = Field(..., description="New password")


@router.post(
    "/users",
    summary="Register",
    description="Create an inactive account and send its activation token by e-mail.",
    operation_id="register",
    responses={
        200: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Invalid input or e-mail in use"},
        502: {"model": ErrorResponse, "description": "Activation e-mail could not be sent"},
    },
)
async def register(request: RegisterRequest, app: AppDep) -> MessageResponse:
    await app.register(request.username, request.email, request.password)
    return MessageResponse(message="User created")


@router.post(
    "/users/token/{token}",
    summary="Activate account",
    operation_id="activateAccount",
    responses={
        200: {"description": "Account activated"},
        400: {"model": ErrorResponse, "description": "Unknown activation token"},
    },
)
async def activate(token: str, app: AppDep) -> MessageResponse:
    await app.activate(token)
    return MessageResponse(message="Account is activated")


@router.get(
    "/users",
    summary="List users",
    description="Get a page of activated users.",
    operation_id="listUsers",
)
async def list_users(app: AppDep, page: PageQuery = None, size: SizeQuery = None) -> PageResult[UserView]:
    return await app.get_users(PageRequest.parse(page, size))


@router.post(
    "/users/password-reset",
    summary="Request password reset",
    description="Send a password reset token to the e-mail of an existing account.",
    operation_id="requestPasswordReset",
    responses={
        200: {"description": "Reset token sent"},
        404: {"model": ErrorResponse, "description": "Unknown e-mail"},
        502: {"model": ErrorResponse, "description": "E-mail could not be sent"},
    },
)
async def request_password_reset(request: PasswordResetRequest, app: AppDep) -> MessageResponse:
    await app.request_password_reset(request.email)
    return MessageResponse(message="Check your e-mail for resetting your password")


@router.put(
    "/users/password",
    summary="Reset password",
    description="Set a new password using a reset token. All sessions of the account are revoked.",
    operation_id="resetPassword",
    responses={
        200: {"description": "Password updated"},
        400: {"model": ErrorResponse, "description": "Password does not meet requirements"},
        403: {"model": ErrorResponse, "description": "Unknown reset token"},
    },
)
async def reset_password(request: PasswordUpdateRequest, app: AppDep) -> MessageResponse:
    await app.reset_password(request.password_reset_token, request.password)
    return MessageResponse(message="Password updated")


@router.get(
    "/users/{user_id}",
    summary="Get user",
    operation_id="getUser",
    responses={404: {"model": ErrorResponse, "description": "User not found or inactive"}},
)
async def get_user(user_id: UUID, app: AppDep) -> UserView:
    return await app.get_user(user_id)


@router.put(
    "/users/{user_id}",
    summary="Update user",
    description="Change the username of the authenticated account.",
    operation_id="updateUser",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid username"},
        403: {"model": ErrorResponse, "description": "Not the owner of this account"},
    },
)
async def update_user(user_id: UUID, request: UpdateUserRequest, app: AppDep, identity: IdentityDep) -> UserView:
    return await app.update_user(identity, user_id, request.username)


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Delete the authenticated account together with its sessions, hoaxes and attachments.",
    operation_id="deleteUser",
    status_code=204,
    responses={
        204: {"description": "User deleted"},
        403: {"model": ErrorResponse, "description": "Not the owner of this account"},
    },
)
async def delete_user(user_id: UUID, app: AppDep, identity: IdentityDep) -> None:
    await app.delete_user(identity, user_id)


@router.get(
    "/users/{user_id}/hoaxes",
    summary="List user hoaxes",
    description="Get a page of hoaxes posted by one user, newest first.",
    operation_id="listUserHoaxes",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
async def list_user_hoaxes(user_id: UUID, app: AppDep, page: PageQuery = None, size: SizeQuery = None) -> PageResult[HoaxView]:
    return await app.get_user_hoaxes(user_id, PageRequest.parse(page, size))
