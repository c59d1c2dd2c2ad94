"""Testes de config.logging.

Cobre: configure_logging, get_logger, log_fallback,
TurnContextFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from app.observability import get_tenant_id
from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    TurnContextFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, NOISY_LOGGERS, VALID_LOG_LEVELS
from tests.fakes.agent_fakes import ScriptedModelClient, build_harness


def _record(msg: str = "agent_turn_completed") -> logging.LogRecord:
    return logging.LogRecord(
        name="app.use_cases.agent",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_default_level_is_info(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_level_is_case_insensitive(self) -> None:
        configure_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="VERBOSE")

    def test_replaces_existing_handlers(self) -> None:
        """Chamadas repetidas não duplicam handlers."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        configure_logging()
        assert len(root.handlers) == 1

    def test_handler_has_turn_context_filter(self) -> None:
        configure_logging(correlation_id_getter=lambda: "turn-1")
        handler = logging.getLogger().handlers[0]
        assert any(isinstance(f, TurnContextFilter) for f in handler.filters)

    def test_quiets_third_party_loggers(self) -> None:
        configure_logging(level="DEBUG")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "sofia_agent"


class TestGetLogger:
    def test_returns_named_logger(self) -> None:
        logger = get_logger("app.services.loop_guard")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "app.services.loop_guard"

    def test_same_name_same_instance(self) -> None:
        assert get_logger("same.module") is get_logger("same.module")


class TestLogFallback:
    """Testes para log_fallback."""

    def test_basic_fields(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "model_client")
        logger.info.assert_called_once()
        args, kwargs = logger.info.call_args
        assert args[0] == "fallback_applied"
        assert kwargs["extra"] == {"fallback_used": True, "component": "model_client"}

    def test_reason_and_elapsed(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "compose_reply", reason="timeout", elapsed_ms=8000.456)
        extra = logger.info.call_args[1]["extra"]
        assert extra["reason"] == "timeout"
        assert extra["elapsed_ms"] == 8000.46


class TestTurnContextFilter:
    """Testes para TurnContextFilter."""

    def test_stamps_turn_context(self) -> None:
        filter_ = TurnContextFilter("sofia_agent", lambda: "corr-123", lambda: "imob-1")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.tenant_id == "imob-1"
        assert record.service == "sofia_agent"

    def test_explicit_values_win(self) -> None:
        filter_ = TurnContextFilter("svc", lambda: "from-getter", lambda: "from-turn")
        record = _record()
        record.correlation_id = "explicit-id"
        record.tenant_id = "tenant-b"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"
        assert record.tenant_id == "tenant-b"

    def test_empty_strings_without_getters(self) -> None:
        filter_ = TurnContextFilter("svc")
        record = _record()
        filter_.filter(record)
        assert record.correlation_id == ""
        assert record.tenant_id == ""

    def test_raw_phone_is_masked(self) -> None:
        """Telefone completo passado por engano em extra não chega ao log."""
        record = _record()
        record.customer_phone = "+55 48 99999-4321"
        TurnContextFilter("svc").filter(record)
        assert record.customer_phone == "***4321"

    @pytest.mark.asyncio
    async def test_orchestrator_turn_sets_tenant(self) -> None:
        seen: list[str] = []

        class _Spy(ScriptedModelClient):
            async def decide(self, request):  # type: ignore[no-untyped-def]
                seen.append(get_tenant_id())
                return await super().decide(request)

        harness = build_harness(_Spy())
        await harness.send("oi", tenant_id="imob-7")

        assert seen == ["imob-7"]
        assert get_tenant_id() == ""


class TestJsonFormatter:
    """Testes para create_json_formatter."""

    def test_output_is_json_with_renamed_fields(self) -> None:
        formatter = create_json_formatter()
        record = _record()
        TurnContextFilter("sofia_agent", lambda: "abc", lambda: "imob-1").filter(record)
        record.latency_ms = 42.5

        data = json.loads(formatter.format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "app.use_cases.agent"
        assert data["message"] == "agent_turn_completed"
        assert data["correlation_id"] == "abc"
        assert data["tenant_id"] == "imob-1"
        assert data["service"] == "sofia_agent"
        assert data["latency_ms"] == 42.5
        assert "timestamp" in data

    def test_required_fields_cover_rename_map(self) -> None:
        assert set(FIELD_RENAME_MAP) <= set(REQUIRED_LOG_FIELDS)
