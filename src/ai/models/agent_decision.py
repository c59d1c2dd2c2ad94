"""Contratos entre o orquestrador e o cliente de modelo."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProposedCall(BaseModel):
    """Chamada de função proposta pelo modelo (nome + argumentos crus)."""

    model_config = ConfigDict(extra="ignore")

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    call_id: str | None = None


class ModelRequest(BaseModel):
    """Entrada do modelo para um turno.

    O histórico já chega mascarado (sem PII) e o resumo de contexto traz
    apenas o que o modelo precisa para resolver referências.
    """

    model_config = ConfigDict(extra="ignore")

    tenant_id: str
    user_message: str
    agent_name: str = "Sofia"
    today: str = ""
    history: list[str] = Field(default_factory=list)
    context_summary: str = ""
    lead_temperature: str = "warm"
    candidate_count: int = 0
    has_pending_quote: bool = False
    has_registered_client: bool = False
    tools: list[dict[str, Any]] = Field(default_factory=list)
    correlation_id: str | None = None


class ModelDecision(BaseModel):
    """Decisão do modelo: texto de resposta e/ou chamadas de função."""

    model_config = ConfigDict(extra="ignore")

    reply_text: str = ""
    function_calls: list[ProposedCall] = Field(default_factory=list)

    @property
    def has_calls(self) -> bool:
        return bool(self.function_calls)


class CallOutcome(BaseModel):
    """Desfecho de uma chamada, entregue à composição da resposta."""

    model_config = ConfigDict(extra="ignore")

    name: str
    status: str
    summary: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
