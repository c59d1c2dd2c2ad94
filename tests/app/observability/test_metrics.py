"""Testes das métricas emitidas como logs estruturados."""

from __future__ import annotations

import logging

import pytest

from app.observability import (
    record_function_call,
    record_latency,
    record_token_usage,
    reset_correlation_id,
    set_correlation_id,
)


@pytest.fixture
def metric_log(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.INFO, logger="app.observability.metrics")
    return caplog


def _last_metric(caplog: pytest.LogCaptureFixture) -> logging.LogRecord:
    records = [r for r in caplog.records if r.name == "app.observability.metrics"]
    assert records, "nenhuma métrica emitida"
    return records[-1]


def test_latency_is_rounded(metric_log: pytest.LogCaptureFixture) -> None:
    record_latency("agent_orchestrator", "handle_message", 12.3456, correlation_id="c-1")

    record = _last_metric(metric_log)
    assert record.getMessage() == "metric_latency"
    assert record.latency_ms == 12.35
    assert record.operation == "handle_message"
    assert record.correlation_id == "c-1"


def test_function_call_uses_current_turn_correlation(
    metric_log: pytest.LogCaptureFixture,
) -> None:
    token = set_correlation_id("turn-42")
    try:
        record_function_call("send_property_media", "suppressed_duplicate", "tenant-a")
    finally:
        reset_correlation_id(token)

    record = _last_metric(metric_log)
    assert record.getMessage() == "metric_function_call"
    assert record.metric_type == "counter"
    assert record.status == "suppressed_duplicate"
    assert record.correlation_id == "turn-42"


def test_correlation_is_none_outside_a_turn(metric_log: pytest.LogCaptureFixture) -> None:
    record_token_usage("openai_model_client", "decide", 100, 20, 120)

    record = _last_metric(metric_log)
    assert record.total_tokens == 120
    assert record.correlation_id is None
