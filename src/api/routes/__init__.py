"""Rotas HTTP da API.

- routes/agent/: mensagem do cliente e limpeza de contexto
- routes/health/: health checks e readiness
- router.py: agrega os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
