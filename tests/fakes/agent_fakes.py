"""Fakes in-memory para testes deterministas do agente."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from ai.models.agent_decision import CallOutcome, ModelDecision, ModelRequest, ProposedCall
from app.domain.transaction import Transaction
from app.infra.stores.memory_domain_stores import (
    MemoryClientRepository,
    MemoryPropertyCatalog,
    MemoryReservationRepository,
    MemoryTransactionRepository,
    MemoryVisitScheduler,
    RecordingMediaSender,
    demo_properties,
)
from app.infra.stores.memory_stores import MemoryContextBackend
from app.protocols.context_store import ContextBackendProtocol
from app.protocols.domain_services import DomainServices
from app.services.functions import build_function_registry
from app.services.loop_guard import LoopGuard
from app.sessions.context_store import ContextStore
from app.use_cases.agent import AgentOrchestrator
from config.settings.agent.agent import AgentSettings
from config.settings.agent.loop_guard import LoopGuardSettings
from utils.errors import RedisConnectionError

TENANT = "tenant-a"
PHONE = "+5548999990000"
# 12h em Brasília
DEFAULT_NOW = datetime(2025, 6, 1, 15, 0, tzinfo=UTC)


class FakeClock:
    """Relógio controlado pelo teste."""

    def __init__(self, now: datetime = DEFAULT_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def call(name: str, /, **arguments: Any) -> ProposedCall:
    return ProposedCall(name=name, arguments=arguments)


class ScriptedModelClient:
    """Devolve decisões pré-definidas, uma por turno.

    Quando o roteiro acaba, responde só com texto.
    """

    def __init__(
        self,
        decisions: Iterable[ModelDecision] = (),
        composed: str | None = None,
    ) -> None:
        self._decisions = list(decisions)
        self._composed = composed
        self.requests: list[ModelRequest] = []
        self.compose_calls: list[list[CallOutcome]] = []

    def push(self, *calls: ProposedCall, reply_text: str = "") -> None:
        self._decisions.append(ModelDecision(reply_text=reply_text, function_calls=list(calls)))

    async def decide(self, request: ModelRequest) -> ModelDecision:
        self.requests.append(request)
        if self._decisions:
            return self._decisions.pop(0)
        return ModelDecision(reply_text="Posso ajudar em algo mais?")

    async def compose_reply(
        self,
        request: ModelRequest,
        outcomes: list[CallOutcome],
    ) -> str | None:
        self.compose_calls.append(list(outcomes))
        return self._composed


class SlowMediaSender(RecordingMediaSender):
    """Sender que demora para concluir (simula canal lento)."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay

    async def send_media(self, tenant_id, customer_phone, urls, caption=""):  # type: ignore[no-untyped-def]
        await asyncio.sleep(self.delay)
        return await super().send_media(tenant_id, customer_phone, urls, caption)


class FlakyContextBackend(ContextBackendProtocol):
    """Backend em memória que falha nas primeiras ``failures`` operações."""

    def __init__(self, failures: int = 0) -> None:
        self._inner = MemoryContextBackend()
        self.failures = failures
        self.calls = 0
        self.saves = 0

    def _maybe_fail(self) -> None:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise RedisConnectionError("backend indisponível")

    async def save(self, key: str, data: dict[str, Any], ttl_seconds: int) -> None:
        self._maybe_fail()
        self.saves += 1
        await self._inner.save(key, data, ttl_seconds)

    async def load(self, key: str) -> dict[str, Any] | None:
        self._maybe_fail()
        return await self._inner.load(key)

    async def delete(self, key: str) -> bool:
        self._maybe_fail()
        return await self._inner.delete(key)


@dataclass
class AgentHarness:
    """Orquestrador montado com colaboradores em memória."""

    orchestrator: AgentOrchestrator
    model: ScriptedModelClient
    services: DomainServices
    store: ContextStore
    backend: ContextBackendProtocol
    clock: FakeClock
    extra: dict[str, Any] = field(default_factory=dict)

    async def send(self, text: str, *, tenant_id: str = TENANT, phone: str = PHONE):  # type: ignore[no-untyped-def]
        return await self.orchestrator.handle_message(tenant_id, phone, text)

    async def context(self, *, tenant_id: str = TENANT, phone: str = PHONE):  # type: ignore[no-untyped-def]
        return await self.store.load(tenant_id, phone)


def build_services(
    *,
    tenants: Iterable[str] = (TENANT,),
    transactions: Iterable[Transaction] = (),
    media: RecordingMediaSender | None = None,
) -> DomainServices:
    catalog = MemoryPropertyCatalog()
    for tenant in tenants:
        for item in demo_properties(tenant):
            catalog.add(item)
    return DomainServices(
        catalog=catalog,
        clients=MemoryClientRepository(),
        reservations=MemoryReservationRepository(),
        transactions=MemoryTransactionRepository(transactions),
        visits=MemoryVisitScheduler(),
        media=media or RecordingMediaSender(),
    )


def build_harness(
    model: Any | None = None,
    *,
    services: DomainServices | None = None,
    backend: ContextBackendProtocol | None = None,
    clock: FakeClock | None = None,
    settings: AgentSettings | None = None,
    loop_guard_settings: LoopGuardSettings | None = None,
    lead_tagger: Any | None = None,
    retry_backoff_seconds: float = 0.0,
) -> AgentHarness:
    clock = clock or FakeClock()
    model = model if model is not None else ScriptedModelClient()
    services = services or build_services()
    backend = backend or MemoryContextBackend()
    store = ContextStore(backend, clock=clock, retry_backoff_seconds=retry_backoff_seconds)
    orchestrator = AgentOrchestrator(
        store=store,
        registry=build_function_registry(services, clock=clock),
        model_client=model,
        loop_guard=LoopGuard(loop_guard_settings, clock=clock),
        settings=settings or AgentSettings(),
        lead_tagger=lead_tagger,
        clock=clock,
    )
    return AgentHarness(
        orchestrator=orchestrator,
        model=model,
        services=services,
        store=store,
        backend=backend,
        clock=clock,
    )
