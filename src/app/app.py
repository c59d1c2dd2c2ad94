"""Entrypoint do serviço do agente Sofia.

Expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import get_orchestrator, initialize_app
from app.bootstrap.clients import create_async_redis_client
from config.logging import get_logger
from config.settings import get_base_settings, get_context_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.use_cases.agent import AgentOrchestrator

# Logging antes de qualquer módulo emitir registros
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: cliente Redis para readiness. Shutdown: fecha conexões."""
    service = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service})
    app.state.redis_client = None

    if get_context_settings().store_backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except ValueError as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down", extra={"service": service})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


def create_app(orchestrator: AgentOrchestrator | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        orchestrator: Orquestrador injetado (testes); padrão vem do bootstrap.
    """
    fastapi_app = FastAPI(
        title="Sofia Agent",
        description="Agente conversacional de locação por temporada",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.state.orchestrator = orchestrator or get_orchestrator()
    fastapi_app.include_router(create_api_router())
    logger.info("app_configured", extra={"service": get_base_settings().service_name})
    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Execução direta (desenvolvimento)."""
    import uvicorn

    uvicorn.run("app.app:app", host="0.0.0.0", port=8080, reload=True)


if __name__ == "__main__":
    main()
