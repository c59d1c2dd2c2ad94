"""Liveness e readiness do serviço do agente.

``/health`` só confirma que o processo responde. ``/ready`` verifica o
backend de contexto (Redis, quando configurado) e informa qual backend de
decisão está ativo; o heurístico deixa o serviço pronto, porém degradado.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()

REDIS_PING_TIMEOUT_SECONDS = 2.0

CheckStatus = Literal["ok", "skipped", "degraded", "failed"]


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de uma checagem de dependência."""

    status: CheckStatus
    latency_ms: float | None = None
    error: str | None = None

    @property
    def blocks_readiness(self) -> bool:
        return self.status == "failed"

    def as_dict(self) -> dict[str, Any]:
        return {"status": self.status, "latency_ms": self.latency_ms, "error": self.error}


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=_now_iso(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: contexto alcançável; modelo heurístico só degrada."""
    state = request.app.state
    checks = {
        "redis": await _check_redis(getattr(state, "redis_client", None)),
        "model": _check_model(getattr(state, "orchestrator", None)),
    }
    ready = not any(check.blocks_readiness for check in checks.values())
    if not ready:
        logger.warning(
            "readiness_failed",
            extra={"failed_checks": [n for n, c in checks.items() if c.blocks_readiness]},
        )
    return JSONResponse(
        content={
            "status": "ready" if ready else "not_ready",
            "checks": {name: check.as_dict() for name, check in checks.items()},
            "timestamp": _now_iso(),
        },
        status_code=200 if ready else 503,
    )


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    if redis_client is None:
        return DependencyCheck(status="skipped", error="not_configured")
    started_at = time.perf_counter()
    try:
        async with asyncio.timeout(REDIS_PING_TIMEOUT_SECONDS):
            await redis_client.ping()
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    elapsed_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(elapsed_ms, 2))


def _check_model(orchestrator: Any | None) -> DependencyCheck:
    if orchestrator is None:
        return DependencyCheck(status="skipped", error="not_configured")
    backend = orchestrator.model_backend
    if backend == "heuristic":
        return DependencyCheck(status="degraded", error=backend)
    return DependencyCheck(status="ok")
