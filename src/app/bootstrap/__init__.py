"""Bootstrap da aplicação: composition root.

Configura logging, valida settings e conecta implementações concretas
aos protocolos.

Uso:
    from app.bootstrap import get_orchestrator, initialize_app

    initialize_app()
    orchestrator = get_orchestrator()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id, get_tenant_id
from config.logging import configure_logging
from config.settings import get_base_settings, validate_all_settings

if TYPE_CHECKING:
    from app.use_cases.agent import AgentOrchestrator

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado e valida settings.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
        tenant_id_getter=get_tenant_id,
    )
    validate_runtime_settings()


def validate_runtime_settings() -> None:
    """Valida settings no startup.

    Em ``staging``/``production`` falha rápido; em ``development``/``test``
    só registra alerta.
    """
    environment = get_base_settings().environment
    errors = validate_all_settings()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


@lru_cache(maxsize=1)
def get_orchestrator() -> AgentOrchestrator:
    """Orquestrador do agente (singleton do processo)."""
    from app.bootstrap.dependencies import create_orchestrator

    return create_orchestrator()
