"""
Módulo FSM: máquina de estados do turno do agente.

Estrutura:
    - states/: Estados do turno (TurnState)
    - transitions/: Grafo de transições (VALID_TRANSITIONS)
    - manager/: Máquina de estados (TurnStateMachine)
    - types/: Registros de transição (StateTransition, TransitionResult)
"""

from fsm.manager import InvalidTransitionError, TurnStateMachine
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    TurnState,
    is_terminal,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "InvalidTransitionError",
    "StateTransition",
    "TransitionResult",
    "TurnState",
    "TurnStateMachine",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "validate_transition_map",
]
