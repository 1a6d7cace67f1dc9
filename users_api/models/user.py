"""User model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """A user record. `password` only ever holds a bcrypt hash."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# Columns that may leave the service. `password` is never one of them.
PUBLIC_COLUMNS = (
    User.id,
    User.name,
    User.email,
    User.phone,
    User.address,
    User.country,
    User.created_at,
)

# Minimal echo returned after a delete.
DELETED_ECHO_COLUMNS = (User.id, User.name, User.email)
