"""Backend de contexto em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e sem compartilhamento entre processos.
"""

from __future__ import annotations

import json
import time
from typing import Any

from app.protocols.context_store import ContextBackendProtocol


class MemoryContextBackend(ContextBackendProtocol):
    """Backend chave-valor em memória com expiração por TTL."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}  # key -> (json, expires_at)

    def _get_live(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if time.time() > expires_at:
            del self._store[key]
            return None
        return data

    async def save(self, key: str, data: dict[str, Any], ttl_seconds: int) -> None:
        # JSON garante que nada mutável do turno fica compartilhado com o store
        self._store[key] = (json.dumps(data), time.time() + ttl_seconds)

    async def load(self, key: str) -> dict[str, Any] | None:
        data = self._get_live(key)
        return json.loads(data) if data is not None else None

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._store)
