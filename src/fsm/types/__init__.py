"""Tipos de transição de estado."""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = [
    "StateTransition",
    "TransitionResult",
]
