from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from hoaxify.app import App
from hoaxify.config import Config
from hoaxify.core.modules.session.models import Identity

AUTH_COOKIE_NAME = "auth_token"

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_presented_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> str | None:
    """Raw credential from the Authorization Bearer header (preferred) or the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return token_cookie or None


async def get_identity(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    token: Annotated[str | None, Depends(get_presented_token)],
) -> Identity | None:
    """Attach the caller's identity to the request, if the presented token authenticates anyone.

    Installed as an application-wide dependency so every routed request with
    a valid token refreshes its session, whether or not the endpoint needs
    authentication. Never rejects a request; endpoints decide that.
    """
    identity = await app.resolve_identity(token)
    request.state.identity = identity
    return identity


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
IdentityDep = Annotated[Identity | None, Depends(get_identity)]
PresentedTokenDep = Annotated[str | None, Depends(get_presented_token)]
