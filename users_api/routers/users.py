"""User management API router."""

from typing import NoReturn

from fastapi import APIRouter, Query, status

from users_api.deps import UserGatewayDep
from users_api.logger import get_logger, log_exception
from users_api.schemas import (
    UserCreate,
    UserDeleteResponse,
    UserPageResponse,
    UserResponse,
    UserUpdate,
)
from users_api.services import (
    EmailConflictError,
    UserNotFoundError,
    UserServiceError,
    UserStorageError,
    UserValidationError,
    user_service,
)
from users_api.utils import (
    raise_bad_request,
    raise_conflict,
    raise_internal_error,
    raise_not_found,
)

router = APIRouter(prefix="/users", tags=["users"])
legacy_router = APIRouter(tags=["users"])
logger = get_logger(__name__)


def _raise_http(exc: UserServiceError, **context: object) -> NoReturn:
    if isinstance(exc, UserValidationError):
        raise_bad_request(str(exc), cause=exc)
    if isinstance(exc, UserNotFoundError):
        logger.debug("User lookup missed", detail=str(exc), **context)
        raise_not_found(str(exc), cause=exc)
    if isinstance(exc, EmailConflictError):
        raise_conflict(str(exc), cause=exc)
    if isinstance(exc, UserStorageError):
        log_exception(logger, exc.__cause__ or exc, str(exc), **context)
    raise_internal_error(str(exc), cause=exc)


@router.get("", response_model=UserPageResponse)
async def list_users(
    gateway: UserGatewayDep,
    page: str | None = Query(None, description="1-based page number (default 1)"),
    limit: str | None = Query(None, description="Page size (default 10)"),
) -> UserPageResponse:
    """List users ordered by id, one page at a time.

    Responds 404 when the requested page holds no users.
    """
    try:
        return await user_service.list_users(gateway, page, limit)
    except UserServiceError as exc:
        _raise_http(exc, page=page, limit=limit)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, gateway: UserGatewayDep) -> UserResponse:
    """Get user by ID."""
    try:
        return await user_service.get_user(gateway, user_id)
    except UserServiceError as exc:
        _raise_http(exc, user_id=user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, gateway: UserGatewayDep) -> UserResponse:
    """Create a new user. The password is stored as a bcrypt hash."""
    try:
        return await user_service.create_user(gateway, user_data)
    except UserServiceError as exc:
        _raise_http(exc)


@legacy_router.post(
    "/createuser",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    deprecated=True,
)
async def create_user_legacy(user_data: UserCreate, gateway: UserGatewayDep) -> UserResponse:
    """Older alias of POST /users."""
    return await create_user(user_data, gateway)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    gateway: UserGatewayDep,
) -> UserResponse:
    """Update only the supplied fields of a user."""
    try:
        return await user_service.update_user(gateway, user_id, user_data)
    except UserServiceError as exc:
        _raise_http(exc, user_id=user_id)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
async def delete_user(user_id: int, gateway: UserGatewayDep) -> UserDeleteResponse:
    """Delete a user permanently."""
    try:
        return await user_service.delete_user(gateway, user_id)
    except UserServiceError as exc:
        _raise_http(exc, user_id=user_id)
