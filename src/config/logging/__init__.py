"""Logging estruturado JSON do agente.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="sofia_agent")
    logger = get_logger(__name__)
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import TurnContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "TurnContextFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
