"""Persistence gateway for the users table.

Every database round trip made on behalf of the users API goes through
`UserGateway.query`, which runs exactly one statement, commits writes, and
classifies driver failures into a `GatewayErrorKind` so callers never look
at driver-specific error codes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import delete, func, insert, literal, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from users_api.logger import async_log_timing, get_logger
from users_api.models import DELETED_ECHO_COLUMNS, PUBLIC_COLUMNS, User

logger = get_logger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

# Range of the users.id INTEGER column
MIN_USER_ID = 1
MAX_USER_ID = 2**31 - 1


class GatewayErrorKind(str, Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    OTHER = "other"


class GatewayError(Exception):
    """A classified persistence failure."""

    def __init__(self, kind: GatewayErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]]
    row_count: int


@dataclass(frozen=True)
class NewUserRow:
    """Column values for an INSERT. `password` is already hashed."""

    name: str
    email: str
    password: str
    phone: str | None = None
    address: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class UserChanges:
    """Merge-update parameters.

    A None field keeps the stored value (COALESCE); anything else overwrites it.
    `password` is already hashed when present.
    """

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    country: str | None = None
    password: str | None = None


def _sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_error(exc: SQLAlchemyError) -> GatewayErrorKind:
    """Map a SQLAlchemy error onto a gateway error kind."""
    if isinstance(exc, IntegrityError) and _sqlstate(exc) == UNIQUE_VIOLATION:
        return GatewayErrorKind.CONFLICT
    return GatewayErrorKind.OTHER


def _coalesce(value: str | None, column: Any) -> Any:
    return func.coalesce(literal(value, column.type), column)


class UserGateway:
    """Executes parameterized statements against the users table."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def query(self, statement: Executable, *, operation: str) -> QueryResult:
        """Run one statement and return its rows plus the affected row count.

        Raises:
            GatewayError: CONFLICT for unique violations, OTHER for any other failure.
        """
        try:
            async with async_log_timing(operation, logger=logger) as timing:
                result = await self._db.execute(statement)
                # Every statement here is a SELECT or carries RETURNING.
                rows = [dict(row) for row in result.mappings().all()]
                row_count = len(rows)
                if statement.is_dml:
                    await self._db.commit()
                timing["row_count"] = row_count
        except SQLAlchemyError as exc:
            await self._db.rollback()
            kind = classify_error(exc)
            logger.warning(
                "Gateway statement failed",
                operation=operation,
                kind=kind.value,
                error_type=type(exc).__name__,
                sqlstate=_sqlstate(exc),
            )
            raise GatewayError(kind, f"{operation} failed") from exc
        except Exception as exc:
            await self._db.rollback()
            logger.warning(
                "Gateway statement failed",
                operation=operation,
                kind=GatewayErrorKind.OTHER.value,
                error_type=type(exc).__name__,
            )
            raise GatewayError(GatewayErrorKind.OTHER, f"{operation} failed") from exc

        return QueryResult(rows=rows, row_count=row_count)

    @staticmethod
    def _require_storable_id(user_id: int, operation: str) -> None:
        # ids outside the INTEGER column range cannot match a row
        if not MIN_USER_ID <= user_id <= MAX_USER_ID:
            raise GatewayError(GatewayErrorKind.NOT_FOUND, f"{operation}: id out of range")

    async def _single_row(self, statement: Executable, *, operation: str) -> dict[str, Any]:
        result = await self.query(statement, operation=operation)
        if not result.rows:
            raise GatewayError(GatewayErrorKind.NOT_FOUND, f"{operation}: no matching row")
        return result.rows[0]

    async def count_users(self) -> int:
        statement = select(func.count(User.id).label("count"))
        result = await self.query(statement, operation="users.count")
        return int(result.rows[0]["count"])

    async def list_users(self, *, limit: int, offset: int) -> list[dict[str, Any]]:
        statement = select(*PUBLIC_COLUMNS).order_by(User.id).limit(limit).offset(offset)
        result = await self.query(statement, operation="users.list")
        return result.rows

    async def get_user(self, user_id: int) -> dict[str, Any]:
        self._require_storable_id(user_id, "users.get")
        statement = select(*PUBLIC_COLUMNS).where(User.id == user_id)
        return await self._single_row(statement, operation="users.get")

    async def insert_user(self, row: NewUserRow) -> dict[str, Any]:
        statement = (
            insert(User)
            .values(
                name=row.name,
                email=row.email,
                phone=row.phone,
                address=row.address,
                country=row.country,
                password=row.password,
            )
            .returning(*PUBLIC_COLUMNS)
        )
        return await self._single_row(statement, operation="users.insert")

    async def update_user(self, user_id: int, changes: UserChanges) -> dict[str, Any]:
        self._require_storable_id(user_id, "users.update")
        statement = (
            update(User)
            .where(User.id == user_id)
            .values(
                name=_coalesce(changes.name, User.name),
                email=_coalesce(changes.email, User.email),
                phone=_coalesce(changes.phone, User.phone),
                address=_coalesce(changes.address, User.address),
                country=_coalesce(changes.country, User.country),
                password=_coalesce(changes.password, User.password),
            )
            .returning(*PUBLIC_COLUMNS)
        )
        return await self._single_row(statement, operation="users.update")

    async def delete_user(self, user_id: int) -> dict[str, Any]:
        self._require_storable_id(user_id, "users.delete")
        statement = delete(User).where(User.id == user_id).returning(*DELETED_ECHO_COLUMNS)
        return await self._single_row(statement, operation="users.delete")
