"""Métricas do agente como logs estruturados.

Cada métrica é um registro ``metric_<nome>`` com ``metric_type`` e
``component``; a agregação fica a cargo do coletor de logs.

- metric_latency: tempo por componente/operação
- metric_function_call: contador por função e desfecho
- metric_lead_temperature: distribuição de temperatura de lead
- metric_token_usage: tokens consumidos pelo modelo

Sem ``correlation_id`` explícito, vale o do turno corrente.
"""

from __future__ import annotations

import logging
from typing import Any

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def _emit(
    metric: str,
    metric_type: str,
    component: str,
    correlation_id: str | None,
    **fields: Any,
) -> None:
    logger.info(
        f"metric_{metric}",
        extra={
            "metric_type": metric_type,
            "component": component,
            "correlation_id": correlation_id or get_correlation_id() or None,
            **fields,
        },
    )


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de uma operação.

    Args:
        component: ex. "agent_orchestrator", "openai_model_client"
        operation: ex. "handle_message", "decide"
        latency_ms: duração em milissegundos
        correlation_id: sobrescreve o do turno corrente
    """
    _emit(
        "latency",
        "latency",
        component,
        correlation_id,
        operation=operation,
        latency_ms=round(latency_ms, 2),
    )


def record_function_call(
    function_name: str,
    status: str,
    tenant_id: str,
    correlation_id: str | None = None,
) -> None:
    """Conta o desfecho de uma chamada (executed, suppressed_duplicate...)."""
    _emit(
        "function_call",
        "counter",
        "function_registry",
        correlation_id,
        function_name=function_name,
        status=status,
        tenant_id=tenant_id,
    )


def record_lead_temperature(
    temperature: str,
    tenant_id: str,
    correlation_id: str | None = None,
) -> None:
    _emit(
        "lead_temperature",
        "counter",
        "lead_classifier",
        correlation_id,
        temperature=temperature,
        tenant_id=tenant_id,
    )


def record_token_usage(
    component: str,
    operation: str,
    prompt_tokens: int,
    completion_tokens: int,
    total_tokens: int,
    correlation_id: str | None = None,
) -> None:
    _emit(
        "token_usage",
        "token_usage",
        component,
        correlation_id,
        operation=operation,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
    )
