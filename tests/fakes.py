"""In-memory stand-in for UserGateway used by router and service tests."""

from datetime import UTC, datetime
from itertools import count
from typing import Any

from users_api.services.user_gateway import (
    GatewayError,
    GatewayErrorKind,
    NewUserRow,
    UserChanges,
)

PUBLIC_FIELDS = ("id", "name", "email", "phone", "address", "country", "created_at")


class InMemoryUserGateway:
    """Mirrors UserGateway's contract over a dict keyed by id."""

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self._ids = count(1)
        self.fail_with: GatewayErrorKind | None = None
        self.calls: list[str] = []

    def _check_failure(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise GatewayError(self.fail_with, f"{operation} failed")

    def _public(self, row: dict[str, Any]) -> dict[str, Any]:
        return {field: row[field] for field in PUBLIC_FIELDS}

    def _email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        return any(row["email"] == email and row_id != exclude_id for row_id, row in self.rows.items())

    def _require(self, user_id: int, operation: str) -> dict[str, Any]:
        if user_id not in self.rows:
            raise GatewayError(GatewayErrorKind.NOT_FOUND, f"{operation}: no matching row")
        return self.rows[user_id]

    async def count_users(self) -> int:
        self._check_failure("users.count")
        return len(self.rows)

    async def list_users(self, *, limit: int, offset: int) -> list[dict[str, Any]]:
        self._check_failure("users.list")
        ordered = [self.rows[row_id] for row_id in sorted(self.rows)]
        return [self._public(row) for row in ordered[offset : offset + limit]]

    async def get_user(self, user_id: int) -> dict[str, Any]:
        self._check_failure("users.get")
        return self._public(self._require(user_id, "users.get"))

    async def insert_user(self, row: NewUserRow) -> dict[str, Any]:
        self._check_failure("users.insert")
        if self._email_taken(row.email):
            raise GatewayError(GatewayErrorKind.CONFLICT, "users.insert failed")
        user_id = next(self._ids)
        self.rows[user_id] = {
            "id": user_id,
            "name": row.name,
            "email": row.email,
            "phone": row.phone,
            "address": row.address,
            "country": row.country,
            "password": row.password,
            "created_at": datetime.now(UTC),
        }
        return self._public(self.rows[user_id])

    async def update_user(self, user_id: int, changes: UserChanges) -> dict[str, Any]:
        self._check_failure("users.update")
        stored = self._require(user_id, "users.update")
        if changes.email is not None and self._email_taken(changes.email, exclude_id=user_id):
            raise GatewayError(GatewayErrorKind.CONFLICT, "users.update failed")
        for field in ("name", "email", "phone", "address", "country", "password"):
            value = getattr(changes, field)
            if value is not None:
                stored[field] = value
        return self._public(stored)

    async def delete_user(self, user_id: int) -> dict[str, Any]:
        self._check_failure("users.delete")
        stored = self._require(user_id, "users.delete")
        del self.rows[user_id]
        return {"id": stored["id"], "name": stored["name"], "email": stored["email"]}
