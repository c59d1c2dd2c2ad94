"""Factories de dependências: implementações concretas por configuração."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ai.core.heuristic_client import HeuristicModelClient
from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import (
    MemoryClientRepository,
    MemoryContextBackend,
    MemoryLeadTagger,
    MemoryPropertyCatalog,
    MemoryReservationRepository,
    MemoryTransactionRepository,
    MemoryVisitScheduler,
    RecordingMediaSender,
    RedisContextBackend,
    demo_properties,
)
from app.protocols.domain_services import DomainServices
from app.services.functions import build_function_registry
from app.services.loop_guard import LoopGuard
from app.sessions.context_store import ContextStore
from app.use_cases.agent import AgentOrchestrator
from config.settings import (
    get_agent_settings,
    get_base_settings,
    get_context_settings,
    get_loop_guard_settings,
)

if TYPE_CHECKING:
    from ai.core.model_client import ModelClientProtocol
    from app.protocols.context_store import ContextBackendProtocol
    from app.protocols.domain_services import LeadTaggerProtocol

logger = logging.getLogger(__name__)

DEMO_TENANT_ENV = "AGENT_DEMO_TENANT_ID"


# ──────────────────────────────────────────────────────────────────────────────
# Contexto
# ──────────────────────────────────────────────────────────────────────────────


def create_context_backend() -> ContextBackendProtocol:
    """Cria backend de contexto conforme CONTEXT_STORE_BACKEND.

    - "memory": MemoryContextBackend (dev/test)
    - "redis": RedisContextBackend (staging/production)
    """
    backend = get_context_settings().store_backend

    if backend == "redis":
        logger.info("context_backend_created", extra={"backend": "redis"})
        return RedisContextBackend(create_async_redis_client())

    environment = get_base_settings().environment
    if environment not in ("development", "test"):
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    logger.info("context_backend_created", extra={"backend": "memory"})
    return MemoryContextBackend()


def create_context_store(
    backend: ContextBackendProtocol | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ContextStore:
    settings = get_context_settings()
    return ContextStore(
        backend or create_context_backend(),
        ttl_seconds=settings.ttl_seconds,
        max_turns=settings.max_turns,
        max_function_calls=settings.max_function_calls,
        retry_attempts=settings.retry_attempts,
        retry_backoff_seconds=settings.retry_backoff_seconds,
        clock=clock,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Colaboradores de domínio e modelo
# ──────────────────────────────────────────────────────────────────────────────


def create_memory_domain_services(demo_tenant_id: str | None = None) -> DomainServices:
    """Colaboradores em memória; catálogo de demonstração para um tenant."""
    tenant = demo_tenant_id or os.getenv(DEMO_TENANT_ENV, "demo")
    return DomainServices(
        catalog=MemoryPropertyCatalog(demo_properties(tenant)),
        clients=MemoryClientRepository(),
        reservations=MemoryReservationRepository(),
        transactions=MemoryTransactionRepository(),
        visits=MemoryVisitScheduler(),
        media=RecordingMediaSender(),
    )


def create_model_client() -> ModelClientProtocol:
    """Cria cliente de modelo conforme AGENT_MODEL_BACKEND."""
    if get_agent_settings().model_backend == "openai":
        from app.infra.ai.openai_model_client import OpenAIModelClient

        logger.info("model_client_created", extra={"backend": "openai"})
        return OpenAIModelClient()

    logger.info("model_client_created", extra={"backend": "heuristic"})
    return HeuristicModelClient()


def create_orchestrator(
    *,
    services: DomainServices | None = None,
    model_client: ModelClientProtocol | None = None,
    context_backend: ContextBackendProtocol | None = None,
    lead_tagger: LeadTaggerProtocol | None = None,
    clock: Callable[[], datetime] | None = None,
) -> AgentOrchestrator:
    """Monta o orquestrador com todas as dependências.

    Qualquer dependência pode ser injetada (testes); o resto vem das
    settings.
    """
    registry = build_function_registry(services or create_memory_domain_services(), clock=clock)
    return AgentOrchestrator(
        store=create_context_store(context_backend, clock=clock),
        registry=registry,
        model_client=model_client or create_model_client(),
        loop_guard=LoopGuard(get_loop_guard_settings(), clock=clock),
        settings=get_agent_settings(),
        lead_tagger=lead_tagger if lead_tagger is not None else MemoryLeadTagger(),
        clock=clock,
    )
