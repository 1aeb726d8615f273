from hoaxify.web.routers.attachments import router as attachments_router
from hoaxify.web.routers.auth import router as auth_router
from hoaxify.web.routers.hoaxes import router as hoaxes_router
from hoaxify.web.routers.users import router as users_router

__all__ = [
    "attachments_router",
    "auth_router",
    "hoaxes_router",
    "users_router",
]
