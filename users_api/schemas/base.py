"""Base schema classes and generic types."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class BaseResponse(BaseModel):
    """Base for all response schemas with from_attributes config."""

    model_config = ConfigDict(from_attributes=True)


class CamelModel(BaseModel):
    """Serializes with camelCase keys; accepts either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationMeta(CamelModel):
    total_users: int
    total_pages: int
    current_page: int
    page_size: int
    next_page: int | None
    prev_page: int | None


class PageResponse(BaseModel, Generic[T]):  # noqa: UP046
    """One page of records plus the metadata needed to walk the rest."""

    data: list[T]
    pagination: PaginationMeta
