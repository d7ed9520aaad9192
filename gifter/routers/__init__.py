"""API routers."""

from gifter.routers.auth import router as auth_router
from gifter.routers.gifts import router as gifts_router
from gifter.routers.people import router as people_router

__all__ = ["auth_router", "gifts_router", "people_router"]
