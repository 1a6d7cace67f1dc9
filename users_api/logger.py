"""structlog setup for the users API.

Log lines are rendered by the stdlib root handler: a console renderer when
DEBUG is on, one JSON object per line otherwise. Request ids bound by the
HTTP middleware are merged into every line through contextvars.
"""

import logging
import sys
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from users_api.config import settings

_SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.format_exc_info,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _select_renderer() -> Processor:
    if settings.debug:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Route structlog and stdlib records through one stdout handler."""
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_select_renderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    logging.basicConfig(handlers=[handler], level=logging.DEBUG if settings.debug else logging.INFO)


def get_logger(name: str | None = None) -> BoundLogger:
    return structlog.get_logger(name)


@asynccontextmanager
async def async_log_timing(
    operation: str,
    logger: BoundLogger,
    level: str = "debug",
) -> AsyncIterator[dict[str, Any]]:
    """Time one database round trip and log it on exit.

    Fields written into the yielded dict (e.g. ``row_count``) are added to the
    log line. ``outcome`` is "error" when the block raised.
    """
    fields: dict[str, Any] = {}
    start = time.perf_counter()
    outcome = "error"
    try:
        yield fields
        outcome = "ok"
    finally:
        fields["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
        getattr(logger, level)(f"{operation} finished", operation=operation, outcome=outcome, **fields)


def log_exception(logger: BoundLogger, exc: BaseException, message: str, **context: Any) -> None:
    """Log a server-side failure with its traceback and exception type."""
    logger.error(message, exc_info=exc, error=str(exc), error_type=type(exc).__name__, **context)
