"""Configuração centralizada de logging do agente Sofia.

Logs JSON estruturados com campos obrigatórios (correlation_id, tenant_id,
service, level, logger, message) e níveis configuráveis por ambiente.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="sofia_agent")

    logger = get_logger(__name__)
    logger.info("agent_turn_completed", extra={"latency_ms": 42})

Nunca registrar telefone completo, documento ou e-mail em logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import TurnContextFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "sofia_agent"

# Bibliotecas de I/O muito verbosas em DEBUG/INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    tenant_id_getter: Callable[[], str] | None = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Chamada uma vez no bootstrap. Chamadas repetidas substituem o handler
    raiz em vez de duplicá-lo.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço injetado em todos os records.
        correlation_id_getter: Função que retorna o correlation_id atual
            (ex: ``app.observability.get_correlation_id``).
        tenant_id_getter: Função que retorna o tenant do turno atual.
        quiet_loggers: Loggers de terceiros elevados para WARNING.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(TurnContextFilter(service_name, correlation_id_getter, tenant_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo (service, correlation_id e tenant_id vêm do filter)."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que um fallback determinístico foi usado (sem PII).

    Args:
        logger: Logger do chamador.
        component: Componente que caiu no fallback (ex: "model_client").
        reason: Motivo curto (ex: "timeout", "unknown_function").
        elapsed_ms: Tempo decorrido até o fallback, quando aplicável.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = round(elapsed_ms, 2)

    logger.info("fallback_applied", extra=extra)
