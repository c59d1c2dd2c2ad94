"""Endpoints do agente: mensagem do cliente e limpeza de contexto."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, ConfigDict, Field

from app.use_cases.agent import AgentOrchestrator

router = APIRouter()


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AgentMessageRequest(_CamelModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    customer_phone: str = Field(..., alias="customerPhone", min_length=1)
    text: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class AgentMessageResponse(_CamelModel):
    reply: str
    functions_executed: list[str] = Field(default_factory=list, alias="functionsExecuted")
    processing_time_ms: int = Field(0, alias="processingTimeMs")


class ClearContextRequest(_CamelModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    customer_phone: str = Field(..., alias="customerPhone", min_length=1)


class ClearContextResponse(BaseModel):
    cleared: bool


def get_agent(request: Request) -> AgentOrchestrator:
    """Orquestrador registrado no ``app.state`` pelo ``create_app``."""
    return request.app.state.orchestrator


AgentDep = Annotated[AgentOrchestrator, Depends(get_agent)]


@router.post("/messages", response_model=AgentMessageResponse)
async def post_message(
    body: AgentMessageRequest,
    agent: AgentDep,
    x_request_id: Annotated[str | None, Header()] = None,
) -> AgentMessageResponse:
    """Processa uma mensagem do cliente e devolve a resposta da assistente."""
    metadata = dict(body.metadata)
    if x_request_id and "request_id" not in metadata:
        metadata["request_id"] = x_request_id

    result = await agent.handle_message(
        body.tenant_id,
        body.customer_phone,
        body.text,
        metadata,
    )
    return AgentMessageResponse(
        reply=result.reply,
        functions_executed=result.functions_executed,
        processing_time_ms=result.processing_time_ms,
    )


@router.post("/clear-context", response_model=ClearContextResponse)
async def clear_context(body: ClearContextRequest, agent: AgentDep) -> ClearContextResponse:
    """Apaga o contexto da conversa (tenant, telefone)."""
    cleared = await agent.clear_context(body.tenant_id, body.customer_phone)
    return ClearContextResponse(cleared=cleared)
