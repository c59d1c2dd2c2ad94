"""
Regras de transição válidas entre estados do turno.

O turno é linear: cada estado só avança para o próximo ou para FAILED.
Único atalho: entrada vazia vai de CONTEXT_LOADED direto a CONTEXT_UPDATED
(o modelo não é chamado).
"""

from fsm.states.turn import TERMINAL_STATES, TurnState

TransitionMap = dict[TurnState, frozenset[TurnState]]

VALID_TRANSITIONS: TransitionMap = {
    TurnState.RECEIVED: frozenset({
        TurnState.CONTEXT_LOADED,
        TurnState.FAILED,
    }),
    TurnState.CONTEXT_LOADED: frozenset({
        TurnState.MODEL_INVOKED,
        TurnState.CONTEXT_UPDATED,
        TurnState.FAILED,
    }),
    TurnState.MODEL_INVOKED: frozenset({
        TurnState.CALLS_GUARDED,
        TurnState.FAILED,
    }),
    TurnState.CALLS_GUARDED: frozenset({
        TurnState.CALLS_DISPATCHED,
        TurnState.FAILED,
    }),
    TurnState.CALLS_DISPATCHED: frozenset({
        TurnState.CONTEXT_UPDATED,
        TurnState.FAILED,
    }),
    TurnState.CONTEXT_UPDATED: frozenset({
        TurnState.REPLY_COMPOSED,
        TurnState.FAILED,
    }),
    TurnState.REPLY_COMPOSED: frozenset(),
    TurnState.FAILED: frozenset(),
}


def get_valid_targets(state: TurnState) -> frozenset[TurnState]:
    """Retorna os destinos permitidos (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: TurnState, to_state: TurnState) -> bool:
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica que todo estado está no mapa, que terminais não têm saída e
    que todo estado não-terminal pode falhar.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in TurnState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        if VALID_TRANSITIONS.get(state):
            errors.append(f"Estado terminal {state.name} não deveria ter transições")

    for state, targets in VALID_TRANSITIONS.items():
        if state not in TERMINAL_STATES and TurnState.FAILED not in targets:
            errors.append(f"Estado {state.name} precisa permitir FAILED")

    return errors
