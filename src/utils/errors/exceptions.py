"""Taxonomia de erros do agente.

Erros de domínio (``AgentError``) são recuperáveis dentro do turno e viram
resposta ao cliente. Erros de infraestrutura (``InfrastructureError``) fazem
o turno falhar fechado, sem executar funções.

Duplicatas suprimidas pelo loop guard não são exceção: viram o status
``suppressed_duplicate`` em ``FunctionCallResult``.
"""

from __future__ import annotations

from typing import Any


class AgentError(Exception):
    """Base para erros de domínio do agente."""


class ValidationError(AgentError):
    """Argumentos inválidos ou ausentes; vira pergunta de esclarecimento.

    Attributes:
        errors: Lista de erros por campo ({"field": ..., "message": ...}).
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class PreconditionError(AgentError):
    """Estado atual não permite a operação (ex: cancelar pagamento já pago)."""

    def __init__(self, message: str, current_status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.current_status = current_status


class UnknownFunctionError(AgentError):
    """Modelo propôs função inexistente no registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Função desconhecida: {name}")
        self.name = name


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura."""


class TransientInfrastructureError(InfrastructureError):
    """Store ou modelo indisponível; o chamador pode tentar de novo com backoff."""


class RedisConnectionError(TransientInfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class ModelUnavailableError(TransientInfrastructureError):
    """Capacidade de linguagem indisponível (timeout, erro de API)."""
