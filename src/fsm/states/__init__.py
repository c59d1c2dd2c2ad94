"""Estados do turno do agente."""

from fsm.states.turn import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    TurnState,
    is_terminal,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "TurnState",
    "is_terminal",
]
