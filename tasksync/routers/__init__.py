"""Routers package for the task sharing API."""

from .auth import router as auth_router
from .sharing import router as sharing_router
from .tasks import router as tasks_router

__all__ = ["auth_router", "sharing_router", "tasks_router"]
