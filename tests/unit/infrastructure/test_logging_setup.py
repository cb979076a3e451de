"""Tests for the structlog/stdlib logging configuration."""

from __future__ import annotations

import logging

import structlog

from sievarr.infrastructure.config.schema import AppConfig
from sievarr.infrastructure.logging.setup import (
    _timestamp_from_record,
    build_logging_config,
)


class TestBuildLoggingConfig:
    def test_logs_go_to_stderr(self) -> None:
        cfg = build_logging_config(AppConfig())
        handler = cfg["handlers"]["stderr"]
        assert handler["stream"] == "ext://sys.stderr"
        assert handler["formatter"] == "structlog"
        assert cfg["root"] == {"handlers": ["stderr"], "level": "INFO"}

    def test_renderer_follows_log_format(self) -> None:
        json_cfg = build_logging_config(AppConfig(environment="prod"))
        console_cfg = build_logging_config(AppConfig(environment="dev"))

        assert isinstance(
            json_cfg["formatters"]["structlog"]["processors"][-1],
            structlog.processors.JSONRenderer,
        )
        assert isinstance(
            console_cfg["formatters"]["structlog"]["processors"][-1],
            structlog.dev.ConsoleRenderer,
        )

    def test_library_loggers_never_lowered_below_warning(self) -> None:
        cfg = build_logging_config(AppConfig(logging={"level": "DEBUG"}))
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert cfg["loggers"]["httpcore"]["level"] == "WARNING"
        assert cfg["root"]["level"] == "DEBUG"

    def test_library_loggers_follow_stricter_level(self) -> None:
        cfg = build_logging_config(AppConfig(logging={"level": "ERROR"}))
        assert cfg["loggers"]["httpx"]["level"] == "ERROR"

    def test_base_config_not_mutated(self) -> None:
        build_logging_config(AppConfig(logging={"level": "ERROR"}))
        assert build_logging_config(AppConfig())["loggers"]["httpx"]["level"] == "WARNING"


def test_foreign_record_timestamp_uses_creation_time() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.created = 0.0

    event = _timestamp_from_record(None, None, {"_record": record})
    assert event["timestamp"] == "1970-01-01T00:00:00Z"
