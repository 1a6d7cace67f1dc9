"""SQLAlchemy models package."""

from users_api.models.user import DELETED_ECHO_COLUMNS, PUBLIC_COLUMNS, User

__all__ = [
    "DELETED_ECHO_COLUMNS",
    "PUBLIC_COLUMNS",
    "User",
]
