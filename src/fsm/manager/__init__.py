"""Máquina de estados do turno."""

from fsm.manager.machine import InvalidTransitionError, TurnStateMachine

__all__ = ["InvalidTransitionError", "TurnStateMachine"]
