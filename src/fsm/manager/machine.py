"""
Máquina de estados do turno (TurnStateMachine).

Controla as transições de um único turno e mantém o histórico para o
registro de observabilidade.
"""

from typing import Any

from fsm.states.turn import DEFAULT_INITIAL_STATE, TurnState, is_terminal
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class InvalidTransitionError(RuntimeError):
    """Transição fora do grafo permitido (erro de programação)."""


class TurnStateMachine:
    """
    Máquina de estados de um turno.

    Attributes:
        current_state: Estado atual
        history: Transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_turn_id")

    def __init__(self, turn_id: str = "", initial_state: TurnState | None = None) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._turn_id = turn_id

    @property
    def current_state(self) -> TurnState:
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia)."""
        return list(self._history)

    @property
    def turn_id(self) -> str:
        return self._turn_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def transition(
        self,
        target: TurnState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho
            metadata: Dados para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def advance(
        self,
        target: TurnState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> StateTransition:
        """Transita ou levanta InvalidTransitionError."""
        result = self.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            raise InvalidTransitionError(result.error_reason or "transição recusada")
        return result.transition

    def fail(self, trigger: str, metadata: dict[str, Any] | None = None) -> None:
        """Leva o turno a FAILED (sem efeito se já terminal)."""
        if not self.is_terminal:
            self.transition(TurnState.FAILED, trigger, metadata)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo seguro para logs."""
        return {
            "turn_id": self._turn_id,
            "current_state": self._current_state.value,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.value for s in get_valid_targets(self._current_state)),
        }

    def get_history_summary(self) -> list[str]:
        """Sequência de estados visitados (ex: ["received", "context_loaded"])."""
        if not self._history:
            return [self._current_state.value]
        return [self._history[0].from_state.value, *(t.to_state.value for t in self._history)]
