"""API routers package."""

from users_api.routers import users

__all__ = ["users"]
