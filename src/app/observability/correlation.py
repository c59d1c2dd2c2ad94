"""Correlation id e tenant do turno em andamento.

Cada turno do agente define um correlation_id (o request_id do turno) e o
tenant da conversa; o ``TurnContextFilter`` injeta os dois em todos os
logs emitidos durante ele. ContextVar mantém o valor isolado por task asyncio, então turnos
concorrentes de conversas diferentes não se misturam.

Uso:
    token = set_correlation_id(metadata.get("request_id"))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_tenant_id: ContextVar[str] = ContextVar("tenant_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id atual ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id (gera UUID se None) e retorna token de reset."""
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def get_tenant_id() -> str:
    return _tenant_id.get()


def set_tenant_id(tenant_id: str) -> Token[str]:
    return _tenant_id.set(tenant_id)


def reset_tenant_id(token: Token[str]) -> None:
    _tenant_id.reset(token)
