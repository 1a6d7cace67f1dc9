from users_api.schemas.base import PageResponse, PaginationMeta
from users_api.schemas.user import (
    DeletedUser,
    UserCreate,
    UserDeleteResponse,
    UserPageResponse,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "DeletedUser",
    "PageResponse",
    "PaginationMeta",
    "UserCreate",
    "UserDeleteResponse",
    "UserPageResponse",
    "UserResponse",
    "UserUpdate",
]
