"""Contrato de persistência do contexto de conversa."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ContextBackendProtocol(ABC):
    """Backend chave-valor assíncrono com TTL para contextos serializados.

    Implementações devem traduzir falhas de infraestrutura em
    ``TransientInfrastructureError`` (ou subclasse).
    """

    @abstractmethod
    async def save(self, key: str, data: dict[str, Any], ttl_seconds: int) -> None: ...

    @abstractmethod
    async def load(self, key: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def delete(self, key: str) -> bool: ...
