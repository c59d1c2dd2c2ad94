"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_health_reports_service_name() -> None:
    response = await health_check()
    assert response.status == "healthy"
    assert response.service


@pytest.mark.asyncio
async def test_readiness_without_redis_is_ready_with_skipped_check() -> None:
    request = _build_request_with_state(SimpleNamespace(redis_client=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["redis"]["status"] == "skipped"
    assert payload["checks"]["model"]["status"] == "skipped"


@pytest.mark.asyncio
async def test_readiness_ok_when_redis_answers() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=True)

    response = await readiness_check(
        _build_request_with_state(SimpleNamespace(redis_client=redis_client))
    )
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["redis"]["status"] == "ok"
    assert payload["checks"]["redis"]["latency_ms"] is not None


@pytest.mark.asyncio
async def test_readiness_not_ready_when_redis_fails() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(side_effect=ConnectionError("down"))

    response = await readiness_check(
        _build_request_with_state(SimpleNamespace(redis_client=redis_client))
    )
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["redis"] == {
        "status": "failed",
        "latency_ms": None,
        "error": "ConnectionError",
    }


@pytest.mark.asyncio
async def test_readiness_reports_heuristic_model_as_degraded() -> None:
    orchestrator = SimpleNamespace(model_backend="heuristic")
    request = _build_request_with_state(
        SimpleNamespace(redis_client=None, orchestrator=orchestrator)
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["model"] == {
        "status": "degraded",
        "latency_ms": None,
        "error": "heuristic",
    }


@pytest.mark.asyncio
async def test_readiness_model_ok_with_openai_backend() -> None:
    request = _build_request_with_state(
        SimpleNamespace(redis_client=None, orchestrator=SimpleNamespace(model_backend="openai"))
    )

    payload = json.loads((await readiness_check(request)).body.decode("utf-8"))

    assert payload["checks"]["model"]["status"] == "ok"
