"""Settings do contexto de conversa.

Janela de turnos, janela de chamadas recentes, TTL e backend do
armazenamento de contexto por (tenant, telefone).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

ContextStoreBackend = Literal["memory", "redis"]

DEFAULT_CONTEXT_TTL_SECONDS = 7200


@dataclass(frozen=True, slots=True)
class ContextSettings:
    """Configurações do contexto de conversa.

    Attributes:
        ttl_seconds: Tempo de vida do contexto sem atividade
        max_turns: Máximo de turnos mantidos (mais antigos descartados)
        max_function_calls: Máximo de chamadas recentes mantidas
        store_backend: Backend de persistência
        retry_attempts: Tentativas extras em falha transitória do backend
        retry_backoff_seconds: Backoff inicial entre tentativas (dobra a cada uma)
    """

    ttl_seconds: int = DEFAULT_CONTEXT_TTL_SECONDS
    max_turns: int = 20
    max_function_calls: int = 20
    store_backend: ContextStoreBackend = "memory"
    retry_attempts: int = 2
    retry_backoff_seconds: float = 0.05

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de contexto.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.ttl_seconds <= 0:
            errors.append("CONTEXT_TTL_SECONDS deve ser > 0")

        if self.max_turns < 2:
            errors.append("CONTEXT_MAX_TURNS deve ser >= 2")

        if self.max_function_calls < 1:
            errors.append("CONTEXT_MAX_FUNCTION_CALLS deve ser >= 1")

        if self.store_backend not in ("memory", "redis"):
            errors.append(f"CONTEXT_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("CONTEXT_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL obrigatório com CONTEXT_STORE_BACKEND=redis")

        if self.retry_attempts < 0:
            errors.append("CONTEXT_STORE_RETRY_ATTEMPTS deve ser >= 0")

        return errors


def _load_context_from_env() -> ContextSettings:
    """Carrega ContextSettings de variáveis de ambiente."""
    backend_str = os.getenv("CONTEXT_STORE_BACKEND", "memory").lower()
    backend: ContextStoreBackend = "redis" if backend_str == "redis" else "memory"
    return ContextSettings(
        ttl_seconds=int(
            os.getenv("CONTEXT_TTL_SECONDS", str(DEFAULT_CONTEXT_TTL_SECONDS))
        ),
        max_turns=int(os.getenv("CONTEXT_MAX_TURNS", "20")),
        max_function_calls=int(os.getenv("CONTEXT_MAX_FUNCTION_CALLS", "20")),
        store_backend=backend,
        retry_attempts=int(os.getenv("CONTEXT_STORE_RETRY_ATTEMPTS", "2")),
        retry_backoff_seconds=float(
            os.getenv("CONTEXT_STORE_RETRY_BACKOFF_SECONDS", "0.05")
        ),
    )


@lru_cache(maxsize=1)
def get_context_settings() -> ContextSettings:
    """Retorna instância cacheada de ContextSettings."""
    return _load_context_from_env()
