"""Lock assíncrono por chave de conversa.

Cada (tenant, telefone) tem seu próprio ``asyncio.Lock``, criado sob
demanda e descartado quando ninguém mais o usa. Os waiters de um
``asyncio.Lock`` são atendidos em ordem de chegada, o que garante a
ordem dos turnos de uma mesma conversa. Conversas diferentes nunca
disputam o mesmo lock.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLock:
    """Mapa de locks por chave com contagem de referências."""

    __slots__ = ("_locks", "_refs")

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._refs: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._refs[key] = self._refs.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
