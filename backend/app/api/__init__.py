"""API routes."""

from .auth_routes import router as auth_router
from .files import router as files_router
from .folders import router as folders_router

__all__ = [
    "auth_router",
    "files_router",
    "folders_router",
]
