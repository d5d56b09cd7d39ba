"""
Test suite for observability helpers.

Covers safe value rendering, correlation IDs on log records and the
correlation middleware response header.

System role: Verification of logging and request tracing
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ragchat.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from ragchat.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from ragchat.observability.middleware import (
    CORRELATION_HEADER,
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)


@pytest.fixture(autouse=True)
def reset_correlation():
    """Start and end every test without a correlation ID."""
    clear_correlation_id()
    yield
    clear_correlation_id()


class TestSafeLogValue:
    """Test suite for safe_log_value()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "None"),
            ("text", "text"),
            ([1, 2, 3], "list(3 items)"),
            ({"a": 1}, "dict(1 keys)"),
            (42, "42"),
        ],
    )
    def test_safe_log_value_should_render_types(self, value, expected) -> None:
        assert safe_log_value(value) == expected

    def test_safe_log_value_should_truncate_long_values(self) -> None:
        rendered = safe_log_value("x" * 20, max_length=5)

        assert rendered.startswith("xxxxx... (truncated, 20 total)")


class TestLogWithContext:
    """Test suite for log_with_context() and log_exception_with_context()."""

    def test_log_with_context_should_attach_correlation_id(self, caplog) -> None:
        # Arrange
        logger = logging.getLogger("ragchat.test")
        set_correlation_id("req-123")

        # Act
        with caplog.at_level(logging.INFO, logger="ragchat.test"):
            log_with_context(logger, logging.INFO, "hello", document_id="doc-1")

        # Assert
        record = caplog.records[-1]
        assert record.document_id == "doc-1"
        assert record.correlation_id == "req-123"

    def test_log_exception_with_context_should_record_error_type(self, caplog) -> None:
        logger = logging.getLogger("ragchat.test")

        with caplog.at_level(logging.ERROR, logger="ragchat.test"):
            log_exception_with_context(logger, "failed", ValueError("bad"), step="embed")

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad"
        assert not hasattr(record, "correlation_id")


class TestCorrelationMiddleware:
    """Test suite for CorrelationMiddleware."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(CorrelationMiddleware)

        @app.get("/ping")
        async def ping():
            return {"correlation_id": get_correlation_id()}

        return TestClient(app)

    def test_middleware_should_echo_incoming_id(self, client: TestClient) -> None:
        response = client.get("/ping", headers={CORRELATION_HEADER: "abc"})

        assert response.headers[CORRELATION_HEADER] == "abc"
        assert response.json() == {"correlation_id": "abc"}

    def test_middleware_should_generate_id_when_missing(self, client: TestClient) -> None:
        response = client.get("/ping")

        generated = response.headers[CORRELATION_HEADER]
        assert generated
        assert response.json() == {"correlation_id": generated}
