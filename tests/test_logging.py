"""Tests for structured logging setup."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from limer_properties.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    clear_request_context()
    structlog.reset_defaults()


class TestRequestContext:
    def test_bind_and_clear(self) -> None:
        bind_request_context(request_id="r1", path="/api/properties")
        assert structlog.contextvars.get_contextvars() == {
            "request_id": "r1",
            "path": "/api/properties",
        }

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestConfigureLogging:
    def test_json_events_carry_service_and_request_context(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(json_output=True, level="debug")
        bind_request_context(request_id="r1")

        structlog.get_logger("test").debug("listing_loaded", count=3)

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["event"] == "listing_loaded"
        assert event["count"] == 3
        assert event["request_id"] == "r1"
        assert event["service"] == "limer-properties"
        assert event["level"] == "debug"

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level=logging.WARNING)

        structlog.get_logger("test").info("ignored")

        assert capsys.readouterr().err == ""

    def test_unknown_level_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="chatty")
