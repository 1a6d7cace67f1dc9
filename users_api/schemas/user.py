"""Pydantic schemas for users."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from users_api.schemas.base import BaseResponse, CamelModel, PageResponse


class UserInput(BaseModel):
    """Raw user fields as sent by the client.

    Every field is optional at this layer. Presence and format rules are
    applied by the user service so that the first failing rule is reported
    with a 400 rather than a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    country: str | None = None
    password: str | None = None


class UserCreate(UserInput):
    """Schema for creating a user."""


class UserUpdate(UserInput):
    """Schema for a merge-update. Omitted or null fields keep their stored value."""


class UserResponse(BaseResponse):
    """Schema for user response. There is no password field by construction."""

    id: int
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    country: str | None = None
    created_at: datetime


class DeletedUser(BaseResponse):
    id: int
    name: str
    email: str


class UserDeleteResponse(CamelModel):
    message: str = "User deleted successfully"
    deleted_user: DeletedUser


UserPageResponse = PageResponse[UserResponse]
