"""Test fixtures and configuration."""

import logging
import os
import sys

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient

# Set ENVIRONMENT for pydantic settings before the app is imported
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from tests.fakes import InMemoryUserGateway  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def configure_structlog_for_tests():
    """Configure structlog for proper capsys capture in tests."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=processors[:-1],
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    yield

    structlog.reset_defaults()


@pytest.fixture
def gateway() -> InMemoryUserGateway:
    """Fresh in-memory users table per test."""
    return InMemoryUserGateway()


@pytest_asyncio.fixture
async def client(gateway: InMemoryUserGateway):
    """Async test client whose users gateway is the in-memory one."""
    from users_api.deps import get_user_gateway
    from users_api.main import app

    app.dependency_overrides[get_user_gateway] = lambda: gateway
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client_instance:
            yield client_instance
    finally:
        app.dependency_overrides.clear()
