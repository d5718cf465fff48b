from hangar.web.routers.auth import router as auth_router
from hangar.web.routers.keys import router as keys_router
from hangar.web.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "keys_router",
    "profile_router",
]
