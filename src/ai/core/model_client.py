"""Protocolo para clientes de modelo do agente."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai.models.agent_decision import CallOutcome, ModelDecision, ModelRequest


@runtime_checkable
class ModelClientProtocol(Protocol):
    """Contrato para o modelo que propõe chamadas de função.

    O modelo é uma caixa-preta: recebe mensagem e contexto, devolve texto
    e/ou chamadas propostas. Nada do que ele propõe é executado sem passar
    pelo registry e pelo loop guard.
    """

    async def decide(self, request: ModelRequest) -> ModelDecision:
        """Propõe resposta e/ou chamadas.

        Raises:
            ModelUnavailableError: modelo indisponível (falha transitória).
        """
        ...

    async def compose_reply(
        self,
        request: ModelRequest,
        outcomes: Sequence[CallOutcome],
    ) -> str | None:
        """Segunda passada opcional: redige a resposta a partir dos resultados.

        Retorna None para usar os resumos das funções.
        """
        ...
