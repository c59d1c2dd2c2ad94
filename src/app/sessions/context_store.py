"""Store de contexto de conversa.

Carrega, persiste e altera o ``ConversationContext`` de cada par
(tenant, telefone). As alterações (append_turn, append_function_call,
set_pending_quote, set_candidate_properties ...) agem sobre o objeto do
turno em andamento e são gravadas de uma vez por ``save``, com o lock da
conversa mantido pelo orquestrador entre load e save.

Chaves nunca contêm o telefone em claro: ``{tenant}:{sha256(phone)[:16]}``.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, TypeVar

from app.domain.business_time import DEFAULT_UTC_OFFSET_HOURS, business_timezone, local_date
from app.sessions.context import (
    ConversationContext,
    FunctionCallRecord,
    PropertySummary,
    RegisteredClient,
    SearchCriteria,
)
from app.sessions.history import Turn, TurnRole
from config.settings.base.context import DEFAULT_CONTEXT_TTL_SECONDS
from utils.errors import TransientInfrastructureError

if TYPE_CHECKING:
    from app.domain.pricing import PriceQuote
    from app.protocols.context_store import ContextBackendProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_CANDIDATE_PROPERTIES = 5


def _utc_now() -> datetime:
    return datetime.now(UTC)


def hash_phone(phone: str) -> str:
    """Hash curto e estável do telefone para chaves e logs."""
    return hashlib.sha256(phone.encode()).hexdigest()[:16]


class ContextStore:
    """Store de contexto com TTL e janelas limitadas."""

    __slots__ = (
        "_backend",
        "_clock",
        "_max_function_calls",
        "_max_turns",
        "_retry_attempts",
        "_retry_backoff_seconds",
        "_ttl_seconds",
        "_tz",
    )

    def __init__(
        self,
        backend: ContextBackendProtocol,
        *,
        ttl_seconds: int = DEFAULT_CONTEXT_TTL_SECONDS,
        max_turns: int = 20,
        max_function_calls: int = 20,
        retry_attempts: int = 2,
        retry_backoff_seconds: float = 0.05,
        clock: Callable[[], datetime] | None = None,
        utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
    ) -> None:
        """Inicializa store.

        Args:
            backend: Backend de persistência (memória ou Redis)
            ttl_seconds: Tempo de vida sem atividade
            max_turns: Janela de turnos mantidos
            max_function_calls: Janela de chamadas recentes mantidas
            retry_attempts: Tentativas extras em falha transitória
            retry_backoff_seconds: Backoff inicial (exponencial)
            clock: Relógio injetável (UTC)
            utc_offset_hours: Fuso do negócio para datas de cotação
        """
        self._backend = backend
        self._ttl_seconds = ttl_seconds
        self._max_turns = max_turns
        self._max_function_calls = max_function_calls
        self._retry_attempts = retry_attempts
        self._retry_backoff_seconds = retry_backoff_seconds
        self._clock = clock or _utc_now
        self._tz = business_timezone(utc_offset_hours)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    @staticmethod
    def context_key(tenant_id: str, customer_phone: str) -> str:
        return f"{tenant_id}:{hash_phone(customer_phone)}"

    # ──────────────────────────────────────────────────────────────────────
    # Persistência
    # ──────────────────────────────────────────────────────────────────────

    async def load(self, tenant_id: str, customer_phone: str) -> ConversationContext:
        """Carrega contexto ou cria um vazio (expirado conta como ausente).

        Raises:
            TransientInfrastructureError: backend indisponível após retries.
        """
        key = self.context_key(tenant_id, customer_phone)
        data = await self._with_retry("load", lambda: self._backend.load(key))
        now = self._clock()

        if data is not None:
            context = ConversationContext.from_dict(data)
            if context.key == (tenant_id, customer_phone) and not context.is_expired(now):
                return context
            logger.debug(
                "context_discarded",
                extra={"tenant_id": tenant_id, "reason": "expired_or_mismatch"},
            )

        return ConversationContext(
            tenant_id=tenant_id,
            customer_phone=customer_phone,
            created_at=now,
            last_activity_at=now,
            expires_at=now + timedelta(seconds=self._ttl_seconds),
        )

    async def save(self, context: ConversationContext) -> None:
        """Grava o contexto inteiro (sobrescrita idempotente) e renova o TTL."""
        now = self._clock()
        context.last_activity_at = now
        context.expires_at = now + timedelta(seconds=self._ttl_seconds)
        key = self.context_key(context.tenant_id, context.customer_phone)
        data = context.to_dict()
        await self._with_retry(
            "save",
            lambda: self._backend.save(key, data, self._ttl_seconds),
        )

    async def clear(self, tenant_id: str, customer_phone: str) -> bool:
        """Remove o contexto. Retorna True se existia."""
        key = self.context_key(tenant_id, customer_phone)
        removed = await self._with_retry("clear", lambda: self._backend.delete(key))
        logger.info(
            "context_cleared",
            extra={"tenant_id": tenant_id, "existed": removed},
        )
        return removed

    async def _with_retry(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except TransientInfrastructureError as exc:
                if attempt >= self._retry_attempts:
                    logger.error(
                        "context_store_unavailable",
                        extra={
                            "operation": operation,
                            "attempts": attempt + 1,
                            "error_type": type(exc).__name__,
                        },
                    )
                    raise
                delay = self._retry_backoff_seconds * (2**attempt)
                logger.warning(
                    "context_store_retry",
                    extra={"operation": operation, "attempt": attempt + 1, "delay": delay},
                )
                attempt += 1
                await asyncio.sleep(delay)

    # ──────────────────────────────────────────────────────────────────────
    # Alterações (no contexto do turno em andamento)
    # ──────────────────────────────────────────────────────────────────────

    def append_turn(self, context: ConversationContext, role: TurnRole, text: str) -> None:
        """Acrescenta turno e descarta os mais antigos além da janela."""
        context.turns.append(Turn(role=role, text=text, timestamp=self._clock()))
        if len(context.turns) > self._max_turns:
            del context.turns[: len(context.turns) - self._max_turns]

    def append_function_call(
        self,
        context: ConversationContext,
        record: FunctionCallRecord,
    ) -> None:
        """Acrescenta chamada executada mantendo a janela limitada."""
        context.recent_function_calls.append(record)
        overflow = len(context.recent_function_calls) - self._max_function_calls
        if overflow > 0:
            del context.recent_function_calls[:overflow]

    def set_pending_quote(
        self,
        context: ConversationContext,
        quote: PriceQuote | None,
    ) -> None:
        """Define (ou limpa) a cotação pendente.

        Cotações com entrada antes de hoje (no fuso do negócio) nunca são
        guardadas.
        """
        if quote is not None and quote.check_in < local_date(self._clock(), self._tz):
            logger.warning(
                "pending_quote_rejected",
                extra={"tenant_id": context.tenant_id, "reason": "past_check_in"},
            )
            return
        context.pending_quote = quote

    def set_candidate_properties(
        self,
        context: ConversationContext,
        properties: list[PropertySummary],
    ) -> None:
        context.candidate_properties = list(properties[:MAX_CANDIDATE_PROPERTIES])

    def set_registered_client(
        self,
        context: ConversationContext,
        client: RegisteredClient | None,
    ) -> None:
        context.registered_client = client

    def set_search_criteria(
        self,
        context: ConversationContext,
        criteria: SearchCriteria | None,
    ) -> None:
        context.search_criteria = criteria
