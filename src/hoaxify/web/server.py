from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hoaxify.app import App
from hoaxify.config import Config
from hoaxify.errors import UserError
from hoaxify.web.deps import get_identity
from hoaxify.web.error_handlers import general_exception_handler, user_error_handler
from hoaxify.web.openapi import API_PREFIX, set_custom_openapi
from hoaxify.web.routers import attachments_router, auth_router, hoaxes_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Hoaxify API",
        lifespan=lifespan,
        # Every request presenting a token resolves (and refreshes) its session
        dependencies=[Depends(get_identity)],
    )

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(hoaxes_router, prefix=API_PREFIX)
    app.include_router(attachments_router, prefix=API_PREFIX)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
