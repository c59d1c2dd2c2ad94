"""Testes da máquina de estados do turno."""

from __future__ import annotations

import pytest

from fsm import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    InvalidTransitionError,
    StateTransition,
    TransitionResult,
    TurnState,
    TurnStateMachine,
    is_terminal,
    is_transition_valid,
    validate_transition_map,
)

HAPPY_PATH = [
    TurnState.CONTEXT_LOADED,
    TurnState.MODEL_INVOKED,
    TurnState.CALLS_GUARDED,
    TurnState.CALLS_DISPATCHED,
    TurnState.CONTEXT_UPDATED,
    TurnState.REPLY_COMPOSED,
]


class TestTransitionMap:
    def test_map_is_consistent(self) -> None:
        assert validate_transition_map() == []

    def test_every_state_mapped(self) -> None:
        assert set(VALID_TRANSITIONS) == set(TurnState)

    def test_terminal_states(self) -> None:
        assert {TurnState.REPLY_COMPOSED, TurnState.FAILED} == TERMINAL_STATES
        assert is_terminal(TurnState.FAILED)
        assert not is_terminal(TurnState.RECEIVED)

    def test_cannot_skip_model(self) -> None:
        assert not is_transition_valid(TurnState.CONTEXT_LOADED, TurnState.CALLS_GUARDED)

    def test_empty_input_shortcut(self) -> None:
        assert is_transition_valid(TurnState.CONTEXT_LOADED, TurnState.CONTEXT_UPDATED)

    def test_terminal_has_no_exit(self) -> None:
        assert not is_transition_valid(TurnState.REPLY_COMPOSED, TurnState.FAILED)


class TestTurnStateMachine:
    def test_happy_path(self) -> None:
        machine = TurnStateMachine(turn_id="turn-1")
        for state in HAPPY_PATH:
            machine.advance(state, f"to_{state.value}")

        assert machine.current_state == TurnState.REPLY_COMPOSED
        assert machine.is_terminal
        assert machine.get_history_summary() == [
            "received",
            *(state.value for state in HAPPY_PATH),
        ]

    def test_invalid_transition_result(self) -> None:
        machine = TurnStateMachine()
        result = machine.transition(TurnState.CALLS_DISPATCHED, "skip")

        assert result.success is False
        assert "RECEIVED" in result.error_reason
        assert machine.current_state == TurnState.RECEIVED

    def test_advance_raises_on_invalid(self) -> None:
        machine = TurnStateMachine()
        with pytest.raises(InvalidTransitionError):
            machine.advance(TurnState.REPLY_COMPOSED, "skip")

    def test_fail_from_any_non_terminal(self) -> None:
        machine = TurnStateMachine()
        machine.advance(TurnState.CONTEXT_LOADED, "loaded")
        machine.fail("timeout")
        assert machine.current_state == TurnState.FAILED

    def test_fail_after_terminal_is_noop(self) -> None:
        machine = TurnStateMachine()
        for state in HAPPY_PATH:
            machine.advance(state, "next")
        machine.fail("late")
        assert machine.current_state == TurnState.REPLY_COMPOSED

    def test_history_is_copy(self) -> None:
        machine = TurnStateMachine()
        machine.advance(TurnState.CONTEXT_LOADED, "loaded")
        machine.history.clear()
        assert len(machine.history) == 1

    def test_state_summary(self) -> None:
        machine = TurnStateMachine(turn_id="abc")
        summary = machine.get_state_summary()
        assert summary["turn_id"] == "abc"
        assert summary["valid_targets"] == ["context_loaded", "failed"]


class TestTransitionTypes:
    def test_empty_trigger_rejected(self) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(TurnState.RECEIVED, TurnState.CONTEXT_LOADED, trigger=" ")

    def test_result_invariants(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)

    def test_log_dict(self) -> None:
        transition = StateTransition(
            TurnState.RECEIVED, TurnState.CONTEXT_LOADED, "loaded", {"calls": 0}
        )
        data = transition.to_log_dict()
        assert data["from_state"] == "received"
        assert data["metadata"] == {"calls": 0}
