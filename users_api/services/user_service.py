"""User resource service: validation, pagination and response shaping.

Each operation makes the single gateway call it needs and translates the
gateway's error kinds into the service exceptions below. Routers map those
onto HTTP status codes.
"""

import math
import re

from users_api.config import settings
from users_api.logger import get_logger
from users_api.schemas import (
    DeletedUser,
    PaginationMeta,
    UserCreate,
    UserDeleteResponse,
    UserPageResponse,
    UserResponse,
    UserUpdate,
)
from users_api.security import hash_password
from users_api.services.user_gateway import (
    GatewayError,
    GatewayErrorKind,
    NewUserRow,
    UserChanges,
    UserGateway,
)

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_LENGTH = 7
MIN_PASSWORD_LENGTH = 8

REQUIRED_FIELDS_MESSAGE = "Name, email, and password are required."
INVALID_EMAIL_MESSAGE = "Invalid email format."
INVALID_PHONE_MESSAGE = "Invalid phone number format."
SHORT_PASSWORD_MESSAGE = "Password must be at least 8 characters long."
SHORT_NEW_PASSWORD_MESSAGE = "New password must be at least 8 characters long."
EMPTY_NAME_MESSAGE = "Name cannot be empty."


class UserServiceError(Exception):
    """Base exception for user service errors."""


class UserValidationError(UserServiceError):
    """Caller-supplied data failed a presence, format or length rule."""


class UserNotFoundError(UserServiceError):
    """No user matches the requested identity (or the page is empty)."""


class EmailConflictError(UserServiceError):
    """Another user already has this email."""


class UserStorageError(UserServiceError):
    """The gateway failed for a reason other than conflict or not-found."""


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    return len(phone) >= MIN_PHONE_LENGTH


def _positive_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_page_params(page: str | int | None, limit: str | int | None) -> tuple[int, int]:
    """Resolve raw page/limit query values, falling back to the defaults."""
    return (
        _positive_int(page, settings.default_page),
        _positive_int(limit, settings.default_page_limit),
    )


def build_pagination(total: int, page: int, limit: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit)
    return PaginationMeta(
        total_users=total,
        total_pages=total_pages,
        current_page=page,
        page_size=limit,
        next_page=page + 1 if page < total_pages else None,
        prev_page=page - 1 if page > 1 else None,
    )


def validate_new_user(data: UserCreate) -> None:
    """Check creation input. The first failing rule wins.

    Raises:
        UserValidationError: with the message of the failed rule.
    """
    if not data.name or not data.email or not data.password:
        raise UserValidationError(REQUIRED_FIELDS_MESSAGE)
    if not is_valid_email(data.email):
        raise UserValidationError(INVALID_EMAIL_MESSAGE)
    if data.phone and not is_valid_phone(data.phone):
        raise UserValidationError(INVALID_PHONE_MESSAGE)
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise UserValidationError(SHORT_PASSWORD_MESSAGE)


def validate_user_changes(data: UserUpdate) -> None:
    """Apply the creation rules to the fields actually supplied."""
    if data.name is not None and not data.name:
        raise UserValidationError(EMPTY_NAME_MESSAGE)
    if data.email is not None and not is_valid_email(data.email):
        raise UserValidationError(INVALID_EMAIL_MESSAGE)
    if data.phone and not is_valid_phone(data.phone):
        raise UserValidationError(INVALID_PHONE_MESSAGE)
    if data.password and len(data.password) < MIN_PASSWORD_LENGTH:
        raise UserValidationError(SHORT_NEW_PASSWORD_MESSAGE)


def _translate(exc: GatewayError, operation: str) -> UserServiceError:
    if exc.kind is GatewayErrorKind.CONFLICT:
        return EmailConflictError("Email already exists.")
    if exc.kind is GatewayErrorKind.NOT_FOUND:
        return UserNotFoundError("User not found")
    return UserStorageError(f"Failed to {operation} due to a server error.")


async def list_users(
    gateway: UserGateway,
    page: str | int | None = None,
    limit: str | int | None = None,
) -> UserPageResponse:
    """Return one page of users ordered by id.

    An empty page raises UserNotFoundError instead of returning an empty list.
    """
    page_number, page_size = parse_page_params(page, limit)
    offset = (page_number - 1) * page_size

    try:
        total = await gateway.count_users()
        rows = await gateway.list_users(limit=page_size, offset=offset)
    except GatewayError as exc:
        raise _translate(exc, "fetch users") from exc

    if not rows:
        raise UserNotFoundError("No users found")

    logger.info("Users fetched", count=len(rows), page=page_number, page_size=page_size)
    return UserPageResponse(
        data=[UserResponse.model_validate(row) for row in rows],
        pagination=build_pagination(total, page_number, page_size),
    )


async def get_user(gateway: UserGateway, user_id: int) -> UserResponse:
    try:
        row = await gateway.get_user(user_id)
    except GatewayError as exc:
        raise _translate(exc, "fetch user") from exc
    return UserResponse.model_validate(row)


async def create_user(gateway: UserGateway, data: UserCreate) -> UserResponse:
    """Validate, hash the password and insert a new user."""
    validate_new_user(data)

    row = NewUserRow(
        name=data.name,
        email=data.email,
        password=hash_password(data.password),
        phone=data.phone,
        address=data.address,
        country=data.country,
    )
    try:
        created = await gateway.insert_user(row)
    except GatewayError as exc:
        raise _translate(exc, "create user") from exc

    logger.info("User created", user_id=created["id"])
    return UserResponse.model_validate(created)


async def update_user(gateway: UserGateway, user_id: int, data: UserUpdate) -> UserResponse:
    """Merge-update the supplied fields; the password is re-hashed only when given."""
    validate_user_changes(data)

    changes = UserChanges(
        name=data.name,
        email=data.email,
        phone=data.phone,
        address=data.address,
        country=data.country,
        password=hash_password(data.password) if data.password else None,
    )
    try:
        updated = await gateway.update_user(user_id, changes)
    except GatewayError as exc:
        raise _translate(exc, "update user") from exc

    logger.info("User updated", user_id=user_id)
    return UserResponse.model_validate(updated)


async def delete_user(gateway: UserGateway, user_id: int) -> UserDeleteResponse:
    try:
        deleted = await gateway.delete_user(user_id)
    except GatewayError as exc:
        raise _translate(exc, "delete user") from exc

    logger.info("User deleted", user_id=user_id)
    return UserDeleteResponse(deleted_user=DeletedUser.model_validate(deleted))
