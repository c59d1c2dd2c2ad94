"""Loop guard: suprime chamadas repetidas de funções com efeito colateral.

Uma chamada é duplicata quando a mesma função com o mesmo hash de
argumentos já foi executada dentro da janela da função: entre as últimas
N chamadas executadas com efeito colateral E nos últimos T segundos (as duas condições valem,
o que dá a janela mais restritiva). Funções somente leitura nunca são
suprimidas.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from config.settings.agent.loop_guard import LoopGuardSettings

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallRequest
    from app.sessions.context import ConversationContext

logger = logging.getLogger(__name__)

REASON_ALLOWED = "allowed"
REASON_READ_ONLY = "read_only"
REASON_DUPLICATE = "duplicate"
REASON_IN_FLIGHT = "in_flight"


def _normalize_value(value: Any) -> Any:
    if isinstance(value, str):
        return " ".join(value.split()).casefold()
    if isinstance(value, Mapping):
        return normalize_arguments(value)
    if isinstance(value, list | tuple | set | frozenset):
        items = [_normalize_value(item) for item in value if item is not None]
        if all(isinstance(item, str) for item in items):
            return sorted(items)
        return items
    return value


def normalize_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Remove None, normaliza strings (espaços e caixa) e ordena listas de texto."""
    return {
        str(key): _normalize_value(value)
        for key, value in arguments.items()
        if value is not None
    }


def argument_hash(arguments: Mapping[str, Any]) -> str:
    """Hash estável (16 hex) do mapeamento de argumentos normalizado."""
    canonical = json.dumps(
        normalize_arguments(arguments),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]


@dataclass(frozen=True, slots=True)
class GuardResult:
    allow: bool
    reason: str
    argument_hash: str


class LoopGuard:
    """Decide se uma chamada pode executar dado o histórico da conversa."""

    __slots__ = ("_clock", "_settings")

    def __init__(
        self,
        settings: LoopGuardSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings or LoopGuardSettings()
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def settings(self) -> LoopGuardSettings:
        return self._settings

    def should_execute(
        self,
        context: ConversationContext,
        request: FunctionCallRequest,
        *,
        side_effecting: bool,
        in_flight: Collection[tuple[str, str]] = (),
        arg_hash: str | None = None,
    ) -> GuardResult:
        """Avalia a chamada.

        Args:
            context: Contexto do turno (``recent_function_calls``)
            request: Chamada já com argumentos completados
            side_effecting: Se a função tem efeito colateral
            in_flight: Pares (função, hash) ainda executando de turnos anteriores
            arg_hash: Hash dos argumentos já validados; sem ele, hash dos crus

        Returns:
            GuardResult com allow, motivo e hash calculado.
        """
        if arg_hash is None:
            arg_hash = argument_hash(request.arguments)

        if not side_effecting:
            return GuardResult(allow=True, reason=REASON_READ_ONLY, argument_hash=arg_hash)

        if (request.name, arg_hash) in in_flight:
            return GuardResult(allow=False, reason=REASON_IN_FLIGHT, argument_hash=arg_hash)

        window = self._settings.window_for(request.name)
        cutoff = self._clock() - timedelta(seconds=window.seconds)
        # consultas não ocupam a janela de contagem
        recent = [r for r in context.recent_function_calls if r.side_effecting][-window.calls :]
        for record in reversed(recent):
            if (
                record.function_name == request.name
                and record.argument_hash == arg_hash
                and record.executed_at >= cutoff
            ):
                logger.info(
                    "loop_guard_suppressed",
                    extra={
                        "tenant_id": context.tenant_id,
                        "function_name": request.name,
                        "argument_hash": arg_hash,
                    },
                )
                return GuardResult(allow=False, reason=REASON_DUPLICATE, argument_hash=arg_hash)

        return GuardResult(allow=True, reason=REASON_ALLOWED, argument_hash=arg_hash)
