from uuid import UUID

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from hoaxify.web.deps import AUTH_COOKIE_NAME, AppDep, ConfigDep, PresentedTokenDep
from hoaxify.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="E-mail address of the account")
    password: str = Field(..., description="Password for authentication")


class LoginResponse(BaseModel):
    """Authentication response."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    token: str = Field(..., description="Session token for subsequent requests")


@router.post(
    "/auth",
    summary="Authenticate user",
    description="Authenticate with e-mail and password to receive a session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Account is not activated"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> LoginResponse:
    user, token = await app.login(login_data.email, login_data.password)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=not config.debug,
        max_age=config.session_ttl_seconds,
    )

    return LoginResponse(id=user.id, username=user.username, token=token)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Revoke the presented session token. Succeeds even if the token is unknown or expired.",
    operation_id="logout",
    status_code=204,
    responses={204: {"description": "Session ended"}},
)
async def logout(app: AppDep, token: PresentedTokenDep, response: Response) -> None:
    await app.logout(token)
    response.delete_cookie(AUTH_COOKIE_NAME)
