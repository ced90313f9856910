"""Tests for tracing support."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from snowflake_operator import tracing
from snowflake_operator.tracing import get_tracer, initialize_tracing, trace_span


class TestInitializeTracing:
    """Test cases for initialize_tracing."""

    def test_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("OTEL_TRACES_ENABLED", raising=False)

        with patch.object(tracing, "_tracer", None):
            initialize_tracing()
            assert get_tracer() is None


class TestTraceSpan:
    """Test cases for trace_span."""

    def test_no_tracer_yields_none(self):
        with patch.object(tracing, "_tracer", None):
            with trace_span("reconcile") as span:
                assert span is None

    def test_span_attributes(self):
        tracer = MagicMock()
        with patch.object(tracing, "_tracer", tracer):
            with trace_span("reconcile", kind="SnowflakeAccount", attributes={"resource.name": "demo"}):
                pass

        tracer.start_as_current_span.assert_called_once_with(
            "reconcile",
            attributes={"resource.name": "demo", "resource.kind": "SnowflakeAccount"},
        )
