"""Agregador de rotas.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.agent.router import router as agent_router
from api.routes.health.router import router as health_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados."""
    api_router = APIRouter()

    # Health checks na raiz (/health, /ready)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(agent_router, prefix="/agent", tags=["agent"])

    return api_router
