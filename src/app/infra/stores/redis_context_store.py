"""Backend de contexto em Redis.

Cada contexto é um JSON sob ``context:{tenant}:{hash_do_telefone}`` com
TTL renovado a cada gravação (SETEX). Falhas do cliente viram
``RedisConnectionError`` (transitória) para o ContextStore tentar de novo.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from app.protocols.context_store import ContextBackendProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

CONTEXT_PREFIX = "context:"


class RedisContextBackend(ContextBackendProtocol):
    """Backend de contexto usando ``redis.asyncio``.

    Args:
        redis_client: Cliente Redis assíncrono
        prefix: Namespace das chaves
    """

    def __init__(self, redis_client: AsyncRedis, prefix: str = CONTEXT_PREFIX) -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def save(self, key: str, data: dict[str, Any], ttl_seconds: int) -> None:
        payload = json.dumps(data)
        try:
            await self._redis.setex(self._key(key), ttl_seconds, payload)
        except Exception as exc:
            raise RedisConnectionError("Falha ao gravar contexto no Redis") from exc
        logger.debug("context_saved", extra={"ttl": ttl_seconds})

    async def load(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self._redis.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao ler contexto no Redis") from exc
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            # Registro corrompido: tratado como ausente para recriar o contexto
            logger.warning("context_load_error", extra={"error": str(exc)})
            return None
        return data if isinstance(data, dict) else None

    async def delete(self, key: str) -> bool:
        try:
            result = await self._redis.delete(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao remover contexto no Redis") from exc
        return bool(result)
