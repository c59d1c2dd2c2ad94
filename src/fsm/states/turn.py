"""
Estados de um turno do agente (mensagem recebida até resposta composta).

Fluxo feliz:
    RECEIVED → CONTEXT_LOADED → MODEL_INVOKED → CALLS_GUARDED
    → CALLS_DISPATCHED → CONTEXT_UPDATED → REPLY_COMPOSED

Qualquer estado não-terminal pode ir para FAILED (resposta de fallback,
contexto do turno descartado).
"""

from enum import StrEnum


class TurnState(StrEnum):
    """Estados canônicos de um turno."""

    RECEIVED = "received"
    CONTEXT_LOADED = "context_loaded"
    MODEL_INVOKED = "model_invoked"
    CALLS_GUARDED = "calls_guarded"
    CALLS_DISPATCHED = "calls_dispatched"
    CONTEXT_UPDATED = "context_updated"

    # Terminais
    REPLY_COMPOSED = "reply_composed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[TurnState] = frozenset({
    TurnState.REPLY_COMPOSED,
    TurnState.FAILED,
})

DEFAULT_INITIAL_STATE: TurnState = TurnState.RECEIVED


def is_terminal(state: TurnState) -> bool:
    return state in TERMINAL_STATES
