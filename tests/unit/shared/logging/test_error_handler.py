"""Tests for structured error logging.

Verifies: error_code, location, operation and masked context in structured logs.
"""

from __future__ import annotations

import logging

import pytest

from mapdb.shared.errors import DurableIOError, DurableUnavailableError
from mapdb.shared.logging.error_handler import create_structured_error, log_structured_error


@pytest.mark.unit
class TestCreateStructuredError:
    def test_from_generic_exception(self) -> None:
        exc = ValueError("bad value")
        try:
            raise exc
        except ValueError:
            result = create_structured_error(exc, location="db")
        assert result.error_code == "ValueError"
        assert result.message == "bad value"
        assert "ValueError" in result.stack_trace

    def test_from_mapdb_error_uses_code(self) -> None:
        result = create_structured_error(DurableUnavailableError("db"), location="db")
        assert result.error_code == "DURABLE_UNAVAILABLE"
        assert result.operation == ""

    def test_operation_taken_from_durable_io_error(self) -> None:
        result = create_structured_error(DurableIOError("clear", "disk I/O error"), location="db")
        assert result.operation == "clear"
        assert result.location == "db"

    def test_explicit_operation_wins(self) -> None:
        exc = DurableIOError("scan", "bad page")
        assert create_structured_error(exc, location="db", operation="recount").operation == (
            "recount"
        )

    def test_masks_url_credentials_in_message(self) -> None:
        exc = DurableUnavailableError("cache", "Cannot reach redis://user:pw@cache:6379/0")
        result = create_structured_error(exc, location="cache")
        assert result.message == "Cannot reach redis://[REDACTED]@cache:6379/0"

    def test_masks_url_credentials_in_context(self) -> None:
        result = create_structured_error(
            RuntimeError("x"),
            location="cache",
            context={"redis_url": "redis://user:pw@cache:6379/0", "memory_enabled": True},
        )
        assert result.context == {
            "redis_url": "redis://[REDACTED]@cache:6379/0",
            "memory_enabled": True,
        }

    def test_keeps_url_without_credentials(self) -> None:
        result = create_structured_error(
            RuntimeError("x"), location="cache", context={"redis_url": "redis://localhost:6379/0"}
        )
        assert result.context["redis_url"] == "redis://localhost:6379/0"


@pytest.mark.unit
class TestLogStructuredError:
    def test_logs_record_with_structured_payload(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("test.mapdb.error_handler")
        exc = DurableUnavailableError("db", "cannot open")
        with caplog.at_level(logging.WARNING, logger=logger.name):
            structured = log_structured_error(
                logger,
                exc,
                location="db",
                operation="open",
                context={"backend": "sqlite"},
                level=logging.WARNING,
            )
        assert structured.error_code == "DURABLE_UNAVAILABLE"
        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.getMessage() == "structured_error"
        assert record.levelno == logging.WARNING
        payload = record.structured_error  # type: ignore[attr-defined]
        assert payload["location"] == "db"
        assert payload["operation"] == "open"
        assert payload["context"] == {"backend": "sqlite"}

    def test_default_level_is_error(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("test.mapdb.error_handler")
        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_structured_error(logger, DurableIOError("put", "disk full"), location="db")
        assert caplog.records[0].levelno == logging.ERROR
