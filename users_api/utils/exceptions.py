"""Common exception utilities for FastAPI routers."""

from typing import NoReturn

from fastapi import HTTPException, status


def raise_not_found(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    ) from cause


def raise_bad_request(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    ) from cause


def raise_conflict(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    ) from cause


def raise_internal_error(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    ) from cause
