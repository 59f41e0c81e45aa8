"""
Test suite for correlation ID propagation.

System role: Verification of request tracing middleware and log filter
"""

import logging

from fastapi.testclient import TestClient

from backend.api.main import create_app
from backend.observability import get_correlation_id, set_correlation_id
from backend.observability.correlation import clear_correlation_id, correlation_scope
from backend.observability.logger import CorrelationIdFilter


class TestCorrelationMiddleware:
    """Test suite for the X-Correlation-ID header."""

    def test_incoming_id_is_echoed(self):
        client = TestClient(create_app())

        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_id_generated_when_missing(self):
        client = TestClient(create_app())

        response = client.get("/api/v1/health")

        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_malformed_id_is_replaced(self):
        client = TestClient(create_app())

        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "bad id; drop table"})

        assert response.headers["X-Correlation-ID"] != "bad id; drop table"
        assert len(response.headers["X-Correlation-ID"]) == 36


def test_filter_tags_records_with_active_id():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

    set_correlation_id("abc")
    try:
        CorrelationIdFilter().filter(record)
    finally:
        clear_correlation_id()

    assert record.correlation_id == "abc"
    assert get_correlation_id() == ""


def test_filter_uses_placeholder_outside_requests():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

    CorrelationIdFilter().filter(record)

    assert record.correlation_id == "-"


def test_scope_restores_outer_id():
    set_correlation_id("outer")
    try:
        with correlation_scope("inner") as inner:
            assert inner == "inner"
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
    finally:
        clear_correlation_id()
