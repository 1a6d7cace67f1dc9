"""Database configuration and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from users_api.config import Settings, settings
from users_api.logger import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def build_database_url(config: Settings) -> str:
    """Return DATABASE_URL, or assemble one from the discrete DB_* settings."""
    if config.database_url:
        return config.database_url
    url = URL.create(
        "postgresql+asyncpg",
        username=config.db_user,
        password=config.db_password,
        host=config.db_host,
        port=config.db_port,
        database=config.db_database,
    )
    return url.render_as_string(hide_password=False)


engine = create_async_engine(
    build_database_url(settings),
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle,
)


@event.listens_for(engine.sync_engine, "connect")
def _log_new_connection(dbapi_connection, connection_record) -> None:
    logger.info("Connected to the database", database=engine.url.database)


async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Test hook to override session maker
_test_session_maker = None


def set_test_session_maker(
    maker: async_sessionmaker[AsyncSession] | None,
) -> async_sessionmaker[AsyncSession] | None:
    """Set test session maker and return the previous value.

    Args:
        maker: New session maker to use for tests, or None to clear

    Returns:
        Previous session maker value
    """
    global _test_session_maker
    previous = _test_session_maker
    _test_session_maker = maker
    return previous


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session."""
    maker = _test_session_maker or async_session_maker
    async with maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create the users table if it does not exist yet."""
    if not settings.create_tables_on_startup:
        logger.info("Skipping table creation", reason="create_tables_on_startup disabled")
        return

    import users_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized", tables=sorted(Base.metadata.tables))
