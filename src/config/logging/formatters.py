"""Formatter JSON dos logs estruturados."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos presentes em todo record
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "tenant_id",
    "service",
)

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com nomes de campo padronizados.

    Exemplo de saída:
        {"timestamp": "2026-03-01T10:30:00", "level": "INFO",
         "logger": "app.use_cases.handle_message",
         "message": "agent_turn_completed", "correlation_id": "abc-123",
         "service": "sofia_agent", "latency_ms": 812.4}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
