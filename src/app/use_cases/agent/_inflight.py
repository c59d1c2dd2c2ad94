"""Chamadas com efeito colateral que sobreviveram a um turno interrompido.

Quando o turno estoura o prazo (ou falha) com uma chamada com efeito
colateral já disparada, a task é estacionada aqui por chave de conversa.
No turno seguinte da mesma conversa as que terminaram com sucesso entram
em ``recent_function_calls``; as que ainda rodam contam como duplicata
para o loop guard. Concluídas há mais que a retenção (conversa que não
voltou a falar) são descartadas a cada novo estacionamento.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.use_cases.agent._result_folding import fold_result
from config.settings.base.context import DEFAULT_CONTEXT_TTL_SECONDS

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallResult
    from app.sessions.context import ConversationContext
    from app.sessions.context_store import ContextStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InFlightCall:
    """Task de efeito colateral disparada em um turno."""

    function_name: str
    argument_hash: str
    task: asyncio.Task[FunctionCallResult]
    finished_at: datetime | None = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.function_name, self.argument_hash)


class InFlightRegistry:
    """Tasks estacionadas por chave de conversa."""

    __slots__ = ("_clock", "_parked", "_retention_seconds")

    def __init__(
        self,
        clock: Callable[[], datetime],
        retention_seconds: int = DEFAULT_CONTEXT_TTL_SECONDS,
    ) -> None:
        self._clock = clock
        self._retention_seconds = retention_seconds
        self._parked: dict[str, list[InFlightCall]] = {}

    def track(
        self,
        function_name: str,
        argument_hash: str,
        task: asyncio.Task[FunctionCallResult],
    ) -> InFlightCall:
        """Envolve a task registrando o instante em que terminou."""
        call = InFlightCall(function_name=function_name, argument_hash=argument_hash, task=task)

        def _mark_finished(_: asyncio.Task[FunctionCallResult]) -> None:
            call.finished_at = self._clock()

        task.add_done_callback(_mark_finished)
        return call

    def park(self, key: str, calls: list[InFlightCall]) -> None:
        self.prune()
        if calls:
            self._parked.setdefault(key, []).extend(calls)
            logger.warning(
                "side_effects_parked",
                extra={
                    "component": "orchestrator",
                    "count": len(calls),
                    "functions": [call.function_name for call in calls],
                },
            )

    def prune(self) -> int:
        """Descarta chamadas concluídas há mais que a retenção.

        Returns:
            Quantas chamadas foram descartadas.
        """
        cutoff = self._clock() - timedelta(seconds=self._retention_seconds)
        pruned = 0
        for key in list(self._parked):
            calls = self._parked[key]
            kept = [c for c in calls if c.finished_at is None or c.finished_at >= cutoff]
            pruned += len(calls) - len(kept)
            if kept:
                self._parked[key] = kept
            else:
                del self._parked[key]
        if pruned:
            logger.info(
                "side_effects_pruned",
                extra={"component": "orchestrator", "count": pruned},
            )
        return pruned

    def running_pairs(self, key: str) -> set[tuple[str, str]]:
        return {call.pair for call in self._parked.get(key, []) if not call.task.done()}

    def reconcile(
        self,
        key: str,
        store: ContextStore,
        context: ConversationContext,
    ) -> int:
        """Incorpora ao contexto as tasks estacionadas já concluídas.

        Returns:
            Quantas chamadas executadas foram registradas.
        """
        parked = self._parked.get(key)
        if not parked:
            return 0

        reconciled = 0
        still_running: list[InFlightCall] = []
        for call in parked:
            if not call.task.done():
                still_running.append(call)
                continue
            if call.task.cancelled() or call.task.exception() is not None:
                continue
            result = call.task.result()
            if result.executed:
                fold_result(
                    store,
                    context,
                    result,
                    side_effecting=True,
                    executed_at=call.finished_at or self._clock(),
                )
                reconciled += 1

        if still_running:
            self._parked[key] = still_running
        else:
            del self._parked[key]

        if reconciled:
            logger.info(
                "side_effects_reconciled",
                extra={"component": "orchestrator", "count": reconciled},
            )
        return reconciled

    def __len__(self) -> int:
        return sum(len(calls) for calls in self._parked.values())
