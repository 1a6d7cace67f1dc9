"""Tests for logging helpers."""

import logging

import pytest
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from users_api import logger as logger_module


def test_select_renderer_uses_console_in_debug(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", True)
    renderer = logger_module._select_renderer()
    assert isinstance(renderer, ConsoleRenderer)


def test_select_renderer_uses_json_in_production(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", False)
    renderer = logger_module._select_renderer()
    assert isinstance(renderer, JSONRenderer)


@pytest.mark.asyncio
async def test_async_log_timing_records_duration() -> None:
    log = logger_module.get_logger("timing-test")

    async with logger_module.async_log_timing("users.count", logger=log, level="info") as timing:
        timing["row_count"] = 1

    assert timing["row_count"] == 1
    assert timing["duration_ms"] >= 0


@pytest.mark.asyncio
async def test_async_log_timing_marks_failed_block(caplog) -> None:
    log = logger_module.get_logger("timing-test")

    with caplog.at_level(logging.INFO), pytest.raises(RuntimeError):
        async with logger_module.async_log_timing("users.insert", logger=log, level="info"):
            raise RuntimeError("driver gone")

    assert "users.insert finished" in caplog.text
    assert "'outcome': 'error'" in caplog.text


def test_log_exception_includes_error_type(caplog) -> None:
    log = logger_module.get_logger("exception-test")

    with caplog.at_level(logging.ERROR):
        try:
            raise ValueError("broken row")
        except ValueError as exc:
            logger_module.log_exception(log, exc, "Failed to shape row", user_id=5)

    out = caplog.text
    assert "Failed to shape row" in out
    assert "ValueError" in out
    assert "broken row" in out


def test_configure_logging_installs_handler(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])

    logger_module.configure_logging()

    assert len(root.handlers) == 1
