"""Testes dos backends de contexto (memória e Redis com mock)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from app.infra.stores.memory_stores import MemoryContextBackend
from app.protocols.context_store import ContextBackendProtocol
from app.infra.stores.redis_context_store import CONTEXT_PREFIX, RedisContextBackend
from utils.errors import RedisConnectionError, TransientInfrastructureError


class TestMemoryContextBackend:
    @pytest.mark.asyncio
    async def test_save_and_load(self) -> None:
        backend = MemoryContextBackend()
        await backend.save("t1:abc", {"turns": []}, ttl_seconds=60)
        assert await backend.load("t1:abc") == {"turns": []}
        assert len(backend) == 1

    @pytest.mark.asyncio
    async def test_loaded_data_is_a_copy(self) -> None:
        backend = MemoryContextBackend()
        data = {"turns": ["a"]}
        await backend.save("k", data, ttl_seconds=60)
        data["turns"].append("b")
        assert await backend.load("k") == {"turns": ["a"]}

    @pytest.mark.asyncio
    async def test_expired_entry_is_gone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        backend = MemoryContextBackend()
        await backend.save("k", {"x": 1}, ttl_seconds=10)
        monkeypatch.setattr("app.infra.stores.memory_stores.time.time", lambda: 10**12)
        assert await backend.load("k") is None
        assert len(backend) == 0

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        backend = MemoryContextBackend()
        await backend.save("k", {}, ttl_seconds=60)
        assert await backend.delete("k") is True
        assert await backend.delete("k") is False


class TestRedisContextBackend:
    @pytest.mark.asyncio
    async def test_save_uses_setex_with_prefix(self) -> None:
        redis = AsyncMock()
        backend = RedisContextBackend(redis)

        await backend.save("t1:abc", {"tenant_id": "t1"}, ttl_seconds=7200)

        redis.setex.assert_awaited_once()
        key, ttl, payload = redis.setex.await_args.args
        assert key == f"{CONTEXT_PREFIX}t1:abc"
        assert ttl == 7200
        assert json.loads(payload) == {"tenant_id": "t1"}

    @pytest.mark.asyncio
    async def test_load_decodes_json(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = json.dumps({"tenant_id": "t1"}).encode()
        backend = RedisContextBackend(redis)

        assert await backend.load("t1:abc") == {"tenant_id": "t1"}
        redis.get.assert_awaited_once_with("context:t1:abc")

    @pytest.mark.asyncio
    async def test_load_missing(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = None
        assert await RedisContextBackend(redis).load("k") is None

    @pytest.mark.asyncio
    async def test_corrupted_payload_treated_as_missing(self) -> None:
        redis = AsyncMock()
        redis.get.return_value = b"{not json"
        assert await RedisContextBackend(redis).load("k") is None

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self) -> None:
        redis = AsyncMock()
        redis.get.side_effect = ConnectionError("down")
        backend = RedisContextBackend(redis)

        with pytest.raises(RedisConnectionError) as exc_info:
            await backend.load("k")
        assert isinstance(exc_info.value, TransientInfrastructureError)

    @pytest.mark.asyncio
    async def test_delete_uses_prefix(self) -> None:
        redis = AsyncMock()
        redis.delete.return_value = 1
        backend = RedisContextBackend(redis, prefix="ctx:")

        assert await backend.delete("k") is True
        redis.delete.assert_awaited_once_with("ctx:k")


def test_backend_contract_is_what_the_store_uses() -> None:
    """O ContextStore só carrega, grava e remove; o contrato não pede mais."""
    assert ContextBackendProtocol.__abstractmethods__ == frozenset({"save", "load", "delete"})
