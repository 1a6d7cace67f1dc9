"""Business services."""

from users_api.services import user_service
from users_api.services.user_gateway import (
    GatewayError,
    GatewayErrorKind,
    NewUserRow,
    QueryResult,
    UserChanges,
    UserGateway,
)
from users_api.services.user_service import (
    EmailConflictError,
    UserNotFoundError,
    UserServiceError,
    UserStorageError,
    UserValidationError,
)

__all__ = [
    "EmailConflictError",
    "GatewayError",
    "GatewayErrorKind",
    "NewUserRow",
    "QueryResult",
    "UserChanges",
    "UserGateway",
    "UserNotFoundError",
    "UserServiceError",
    "UserStorageError",
    "UserValidationError",
    "user_service",
]
