"""Contratos de chamada de função entre orquestrador e registry."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class FunctionCallStatus(StrEnum):
    EXECUTED = "executed"
    SUPPRESSED_DUPLICATE = "suppressed_duplicate"
    REJECTED_VALIDATION = "rejected_validation"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FunctionCallRequest:
    """Chamada proposta pelo modelo, ainda não validada."""

    name: str
    arguments: Mapping[str, Any]
    tenant_id: str
    customer_phone: str


@dataclass(frozen=True, slots=True)
class FunctionCallResult:
    """Resultado de uma chamada (executada ou não).

    Attributes:
        function_name: Função chamada
        status: Desfecho da chamada
        payload: Dados estruturados para o orquestrador
        human_summary: Trecho de texto que pode ir para a resposta
        errors: Erros por campo (rejected_validation)
        argument_hash: Hash estável dos argumentos normalizados
    """

    function_name: str
    status: FunctionCallStatus
    payload: dict[str, Any] = field(default_factory=dict)
    human_summary: str = ""
    errors: tuple[dict[str, Any], ...] = ()
    argument_hash: str = ""

    @property
    def executed(self) -> bool:
        return self.status == FunctionCallStatus.EXECUTED

    def with_hash(self, argument_hash: str) -> FunctionCallResult:
        return replace(self, argument_hash=argument_hash)


def executed(function_name: str, human_summary: str, **payload: Any) -> FunctionCallResult:
    """Atalho para resultado executado com payload."""
    return FunctionCallResult(
        function_name=function_name,
        status=FunctionCallStatus.EXECUTED,
        payload=payload,
        human_summary=human_summary,
    )


__all__ = [
    "FunctionCallRequest",
    "FunctionCallResult",
    "FunctionCallStatus",
    "executed",
]
