"""Orquestração de um turno do agente Sofia.

Fluxo: lock da conversa → carga do contexto → modelo propõe chamadas →
argumentos completados pelo contexto → loop guard → registry → resultados
incorporados ao contexto → resposta composta → contexto salvo.

O turno trabalha sobre o contexto carregado e grava uma única vez no
final. Qualquer erro leva a FSM a FAILED, devolve resposta segura e não
grava nada. Efeitos colaterais já disparados por um turno que falhou são
estacionados e reconciliados no próximo turno da mesma conversa.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ai.models.agent_decision import CallOutcome, ModelRequest
from ai.rules.fallbacks import (
    default_reply,
    duplicate_ack,
    empty_input_reply,
    turn_failed_reply,
    unknown_function_reply,
)
from ai.rules.lead_classifier import classify
from ai.utils.sanitizer import mask_history, mask_phone
from app.domain.function_call import (
    FunctionCallRequest,
    FunctionCallResult,
    FunctionCallStatus,
)
from app.domain.lead import LeadClassification
from app.observability.correlation import (
    generate_correlation_id,
    reset_correlation_id,
    reset_tenant_id,
    set_correlation_id,
    set_tenant_id,
)
from app.observability.metrics import (
    record_function_call,
    record_latency,
    record_lead_temperature,
)
from app.services.keyed_lock import KeyedLock
from app.sessions.history import TurnRole
from app.use_cases.agent._argument_filling import fill_arguments
from app.use_cases.agent._inflight import InFlightCall, InFlightRegistry
from app.use_cases.agent._result_folding import fold_result, summarize_context
from config.logging import log_fallback
from config.settings.agent.agent import AgentSettings, get_agent_settings
from fsm.manager import TurnStateMachine
from fsm.states import TurnState
from utils.text import has_letters_or_digits

if TYPE_CHECKING:
    from ai.core.model_client import ModelClientProtocol
    from ai.models.agent_decision import ModelDecision, ProposedCall
    from app.protocols.domain_services import LeadTaggerProtocol
    from app.services.function_registry import FunctionRegistry
    from app.services.loop_guard import LoopGuard
    from app.sessions.context import ConversationContext
    from app.sessions.context_store import ContextStore

logger = logging.getLogger(__name__)

_COMPONENT = "orchestrator"


@dataclass(frozen=True, slots=True)
class TurnResult:
    """Resultado de ``handle_message``.

    Attributes:
        reply: Texto a enviar ao cliente (nunca vazio)
        functions_executed: Funções efetivamente executadas no turno
        processing_time_ms: Duração do turno
        final_state: Estado terminal da FSM do turno
        results: Resultados de todas as chamadas avaliadas
    """

    reply: str
    functions_executed: list[str]
    processing_time_ms: int
    final_state: str = TurnState.REPLY_COMPOSED.value
    results: tuple[FunctionCallResult, ...] = ()


@dataclass(slots=True)
class _TurnAccumulator:
    """Acumuladores de um turno em andamento."""

    results: list[FunctionCallResult] = field(default_factory=list)
    side_effects: list[InFlightCall] = field(default_factory=list)
    unknown_functions: list[str] = field(default_factory=list)
    lead: LeadClassification = field(default_factory=LeadClassification)

    def names_with(self, status: FunctionCallStatus) -> list[str]:
        return [r.function_name for r in self.results if r.status == status]


class AgentOrchestrator:
    """Executa turnos do agente, um por vez por conversa."""

    def __init__(
        self,
        *,
        store: ContextStore,
        registry: FunctionRegistry,
        model_client: ModelClientProtocol,
        loop_guard: LoopGuard,
        settings: AgentSettings | None = None,
        lead_tagger: LeadTaggerProtocol | None = None,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._model = model_client
        self._guard = loop_guard
        self._settings = settings or get_agent_settings()
        self._lead_tagger = lead_tagger
        self._locks = locks or KeyedLock()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._inflight = InFlightRegistry(self._clock, retention_seconds=store.ttl_seconds)

    @property
    def inflight(self) -> InFlightRegistry:
        return self._inflight

    @property
    def model_backend(self) -> str:
        """Nome do backend de decisão em uso (readiness e logs)."""
        return getattr(self._model, "backend", type(self._model).__name__)

    # ──────────────────────────────────────────────────────────────────────
    # API pública
    # ──────────────────────────────────────────────────────────────────────

    async def handle_message(
        self,
        tenant_id: str,
        customer_phone: str,
        text: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> TurnResult:
        """Processa uma mensagem do cliente e devolve a resposta.

        Nunca levanta exceção por falha de domínio ou infraestrutura: o
        turno termina em FAILED com resposta segura.
        """
        started = time.perf_counter()
        request_id = str((metadata or {}).get("request_id") or generate_correlation_id())
        token = set_correlation_id(request_id)
        tenant_token = set_tenant_id(tenant_id)
        machine = TurnStateMachine(turn_id=request_id)
        turn = _TurnAccumulator()
        key = self._store.context_key(tenant_id, customer_phone)

        try:
            async with self._locks.hold(key):
                try:
                    async with asyncio.timeout(self._settings.turn_timeout_seconds):
                        reply = await self._run_turn(
                            machine, turn, key, tenant_id, customer_phone, text or ""
                        )
                except TimeoutError:
                    machine.fail("timeout")
                    self._inflight.park(key, turn.side_effects)
                    logger.error(
                        "agent_turn_timeout",
                        extra={
                            "component": _COMPONENT,
                            "tenant_id": tenant_id,
                            "timeout_seconds": self._settings.turn_timeout_seconds,
                        },
                    )
                    reply = turn_failed_reply()
                except Exception as exc:
                    machine.fail("error", {"error_type": type(exc).__name__})
                    self._inflight.park(key, turn.side_effects)
                    logger.exception(
                        "agent_turn_failed",
                        extra={
                            "component": _COMPONENT,
                            "tenant_id": tenant_id,
                            "error_type": type(exc).__name__,
                            "state": machine.history[-1].from_state.value
                            if machine.history
                            else machine.current_state.value,
                        },
                    )
                    reply = turn_failed_reply()

            latency_ms = (time.perf_counter() - started) * 1000
            self._log_turn(machine, turn, tenant_id, customer_phone, latency_ms)
            return TurnResult(
                reply=reply,
                functions_executed=turn.names_with(FunctionCallStatus.EXECUTED),
                processing_time_ms=int(latency_ms),
                final_state=machine.current_state.value,
                results=tuple(turn.results),
            )
        finally:
            reset_tenant_id(tenant_token)
            reset_correlation_id(token)

    async def clear_context(self, tenant_id: str, customer_phone: str) -> bool:
        """Apaga o contexto da conversa (respeitando o lock da chave)."""
        key = self._store.context_key(tenant_id, customer_phone)
        async with self._locks.hold(key):
            return await self._store.clear(tenant_id, customer_phone)

    # ──────────────────────────────────────────────────────────────────────
    # Turno
    # ──────────────────────────────────────────────────────────────────────

    async def _run_turn(
        self,
        machine: TurnStateMachine,
        turn: _TurnAccumulator,
        key: str,
        tenant_id: str,
        customer_phone: str,
        text: str,
    ) -> str:
        context = await self._store.load(tenant_id, customer_phone)
        self._inflight.reconcile(key, self._store, context)
        machine.advance(TurnState.CONTEXT_LOADED, "context_loaded")

        if not has_letters_or_digits(text):
            reply = empty_input_reply()
            if text.strip():
                self._store.append_turn(context, TurnRole.USER, text.strip())
                self._store.append_turn(context, TurnRole.ASSISTANT, reply)
            machine.advance(TurnState.CONTEXT_UPDATED, "empty_input")
            await self._store.save(context)
            machine.advance(TurnState.REPLY_COMPOSED, "reply_composed")
            return reply

        request = self._build_model_request(context, text)
        self._store.append_turn(context, TurnRole.USER, text)
        turn.lead = classify(context.turns)
        request = request.model_copy(update={"lead_temperature": turn.lead.temperature.value})
        await self._tag_lead(tenant_id, customer_phone, turn.lead)

        decision = await self._model.decide(request)
        machine.advance(
            TurnState.MODEL_INVOKED,
            "model_decided",
            {"proposed_calls": len(decision.function_calls)},
        )

        machine.advance(TurnState.CALLS_GUARDED, "guard_started")
        outcomes: list[CallOutcome] = []
        fragments: list[str] = []
        for proposed in decision.function_calls:
            result = await self._process_call(context, turn, key, proposed)
            if result is None:
                continue
            outcomes.append(
                CallOutcome(
                    name=result.function_name,
                    status=result.status.value,
                    summary=result.human_summary,
                    payload=result.payload,
                )
            )
            if result.status == FunctionCallStatus.SUPPRESSED_DUPLICATE:
                fragments.append(duplicate_ack(result.function_name))
            elif result.human_summary:
                fragments.append(result.human_summary)
        machine.advance(
            TurnState.CALLS_DISPATCHED,
            "calls_dispatched",
            {"results": len(turn.results)},
        )

        reply = await self._compose_reply(request, decision, outcomes, fragments, turn)
        self._store.append_turn(context, TurnRole.ASSISTANT, reply)
        machine.advance(TurnState.CONTEXT_UPDATED, "context_updated")

        await self._store.save(context)
        machine.advance(TurnState.REPLY_COMPOSED, "reply_composed")
        return reply

    async def _process_call(
        self,
        context: ConversationContext,
        turn: _TurnAccumulator,
        key: str,
        proposed: ProposedCall,
    ) -> FunctionCallResult | None:
        """Completa, avalia no loop guard, despacha e incorpora uma chamada."""
        if not self._registry.has(proposed.name):
            turn.unknown_functions.append(proposed.name)
            logger.warning(
                "unknown_function_proposed",
                extra={
                    "component": _COMPONENT,
                    "tenant_id": context.tenant_id,
                    "function_name": proposed.name,
                },
            )
            return None

        request = FunctionCallRequest(
            name=proposed.name,
            arguments=fill_arguments(proposed.name, proposed.arguments, context),
            tenant_id=context.tenant_id,
            customer_phone=context.customer_phone,
        )
        side_effecting = self._registry.is_side_effecting(request.name)
        guard = self._guard.should_execute(
            context,
            request,
            side_effecting=side_effecting,
            in_flight=self._inflight.running_pairs(key),
            arg_hash=self._registry.argument_hash_for(request),
        )

        if not guard.allow:
            result = FunctionCallResult(
                function_name=request.name,
                status=FunctionCallStatus.SUPPRESSED_DUPLICATE,
                payload={"reason": guard.reason},
                argument_hash=guard.argument_hash,
            )
        elif side_effecting:
            task = asyncio.create_task(self._registry.dispatch(request))
            turn.side_effects.append(
                self._inflight.track(request.name, guard.argument_hash, task)
            )
            result = await asyncio.shield(task)
        else:
            result = await self._registry.dispatch(request)

        fold_result(
            self._store,
            context,
            result,
            side_effecting=side_effecting,
            executed_at=self._clock(),
        )
        turn.results.append(result)
        record_function_call(result.function_name, result.status.value, context.tenant_id)
        return result

    async def _compose_reply(
        self,
        request: ModelRequest,
        decision: ModelDecision,
        outcomes: list[CallOutcome],
        fragments: list[str],
        turn: _TurnAccumulator,
    ) -> str:
        """Resposta final: segunda passada do modelo ou resumos das funções."""
        if outcomes:
            composed: str | None = None
            compose_started = time.perf_counter()
            try:
                async with asyncio.timeout(self._settings.compose_timeout_seconds):
                    composed = await self._model.compose_reply(request, outcomes)
            except TimeoutError:
                log_fallback(
                    logger,
                    "compose_reply",
                    reason="timeout",
                    elapsed_ms=(time.perf_counter() - compose_started) * 1000,
                )
            if composed and composed.strip():
                return composed.strip()
            if fragments:
                return "\n\n".join(fragments)

        if decision.reply_text.strip():
            return decision.reply_text.strip()
        if turn.unknown_functions:
            log_fallback(logger, _COMPONENT, reason="unknown_function")
            return unknown_function_reply()
        return default_reply()

    # ──────────────────────────────────────────────────────────────────────
    # Apoio
    # ──────────────────────────────────────────────────────────────────────

    def _build_model_request(self, context: ConversationContext, text: str) -> ModelRequest:
        return ModelRequest(
            tenant_id=context.tenant_id,
            user_message=text,
            agent_name=self._settings.agent_name,
            today=self._registry.local_now().date().isoformat(),
            history=mask_history(context.turns),
            context_summary=summarize_context(context),
            candidate_count=len(context.candidate_properties),
            has_pending_quote=context.pending_quote is not None,
            has_registered_client=context.registered_client is not None,
            tools=self._registry.tool_definitions(),
        )

    async def _tag_lead(
        self,
        tenant_id: str,
        customer_phone: str,
        lead: LeadClassification,
    ) -> None:
        record_lead_temperature(lead.temperature.value, tenant_id)
        if self._lead_tagger is None or not lead.needs_follow_up:
            return
        try:
            await self._lead_tagger.tag_lead(tenant_id, customer_phone, lead)
        except Exception as exc:
            # Marcação no CRM é acessória ao turno
            logger.warning(
                "lead_tagging_failed",
                extra={
                    "component": _COMPONENT,
                    "tenant_id": tenant_id,
                    "error_type": type(exc).__name__,
                },
            )

    def _log_turn(
        self,
        machine: TurnStateMachine,
        turn: _TurnAccumulator,
        tenant_id: str,
        customer_phone: str,
        latency_ms: float,
    ) -> None:
        record_latency(_COMPONENT, "handle_message", latency_ms)
        logger.info(
            "agent_turn_completed",
            extra={
                "component": _COMPONENT,
                "request_id": machine.turn_id,
                "tenant_id": tenant_id,
                "phone_masked": mask_phone(customer_phone),
                "functions_attempted": [r.function_name for r in turn.results],
                "functions_executed": turn.names_with(FunctionCallStatus.EXECUTED),
                "functions_suppressed": turn.names_with(
                    FunctionCallStatus.SUPPRESSED_DUPLICATE
                ),
                "functions_rejected": turn.names_with(FunctionCallStatus.REJECTED_VALIDATION),
                "functions_failed": turn.names_with(FunctionCallStatus.FAILED),
                "unknown_functions": turn.unknown_functions,
                "latency_ms": round(latency_ms, 2),
                "lead_temperature": turn.lead.temperature.value,
                "final_state": machine.current_state.value,
                "states": machine.get_history_summary(),
            },
        )
