"""Stores: backends de contexto e colaboradores de domínio em memória.

Módulos:
    - memory_stores: backend de contexto em memória (dev/test)
    - redis_context_store: backend de contexto em Redis (SETEX)
    - memory_domain_stores: catálogo, clientes, reservas, transações,
      visitas, mídia e CRM em memória
"""

from __future__ import annotations

from app.infra.stores.memory_domain_stores import (
    MemoryClientRepository,
    MemoryLeadTagger,
    MemoryPropertyCatalog,
    MemoryReservationRepository,
    MemoryTransactionRepository,
    MemoryVisitScheduler,
    RecordingMediaSender,
    SentMedia,
    demo_properties,
)
from app.infra.stores.memory_stores import MemoryContextBackend
from app.infra.stores.redis_context_store import CONTEXT_PREFIX, RedisContextBackend

__all__ = [
    "CONTEXT_PREFIX",
    "MemoryClientRepository",
    "MemoryContextBackend",
    "MemoryLeadTagger",
    "MemoryPropertyCatalog",
    "MemoryReservationRepository",
    "MemoryTransactionRepository",
    "MemoryVisitScheduler",
    "RecordingMediaSender",
    "RedisContextBackend",
    "SentMedia",
    "demo_properties",
]
