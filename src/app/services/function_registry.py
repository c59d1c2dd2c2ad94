"""Registry declarativo das funções que o agente pode chamar.

Cada função tem um schema pydantic, um handler assíncrono e a marcação
``side_effecting``. ``dispatch`` valida os argumentos antes de chamar o
handler: argumento inválido vira ``rejected_validation`` com erros por
campo, nunca execução parcial. Handlers não mexem no contexto nem fazem
supressão de duplicatas.

O registry é congelado no bootstrap e só lido depois disso.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.domain.business_time import DEFAULT_UTC_OFFSET_HOURS, business_timezone
from app.domain.function_call import (
    FunctionCallRequest,
    FunctionCallResult,
    FunctionCallStatus,
)
from app.protocols.domain_services import DomainServices
from app.services.loop_guard import argument_hash
from utils.errors import (
    PreconditionError,
    UnknownFunctionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


GENERIC_FAILURE_SUMMARY = (
    "Tive um problema técnico para concluir essa ação agora. "
    "Pode tentar de novo em instantes?"
)


@dataclass(frozen=True, slots=True)
class HandlerEnv:
    """Ambiente entregue ao handler: colaboradores e relógio local."""

    services: DomainServices
    now: datetime

    @property
    def today(self) -> date:
        return self.now.date()


Handler = Callable[[Any, FunctionCallRequest, HandlerEnv], Awaitable[FunctionCallResult]]


@dataclass(frozen=True, slots=True)
class RegisteredFunction:
    name: str
    schema: type[BaseModel]
    side_effecting: bool
    handler: Handler
    description: str = ""

    def tool_definition(self) -> dict[str, Any]:
        """Definição no formato de tools da API de chat da OpenAI."""
        parameters = self.schema.model_json_schema(by_alias=True)
        parameters.pop("title", None)
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }


def _validated_hash(args: BaseModel) -> str:
    return argument_hash(args.model_dump(by_alias=True, mode="json"))


def _field_errors(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "arguments",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


class FunctionRegistry:
    """Catálogo de funções e despacho validado."""

    def __init__(
        self,
        services: DomainServices,
        *,
        clock: Callable[[], datetime] | None = None,
        utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
    ) -> None:
        self._services = services
        self._clock = clock or (lambda: datetime.now(UTC))
        self._tz = business_timezone(utc_offset_hours)
        self._functions: dict[str, RegisteredFunction] = {}
        self._frozen = False

    # ──────────────────────────────────────────────────────────────────────
    # Registro
    # ──────────────────────────────────────────────────────────────────────

    def register(
        self,
        name: str,
        schema: type[BaseModel],
        side_effecting: bool,
        handler: Handler,
        description: str = "",
    ) -> None:
        """Registra uma função.

        Raises:
            RuntimeError: registry já congelado.
            ValueError: nome repetido.
        """
        if self._frozen:
            msg = f"Registry congelado; não é possível registrar {name}"
            raise RuntimeError(msg)
        if name in self._functions:
            msg = f"Função já registrada: {name}"
            raise ValueError(msg)
        self._functions[name] = RegisteredFunction(
            name=name,
            schema=schema,
            side_effecting=side_effecting,
            handler=handler,
            description=description,
        )

    def freeze(self) -> None:
        self._frozen = True

    def get(self, name: str) -> RegisteredFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise UnknownFunctionError(name) from None

    def has(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return list(self._functions)

    def is_side_effecting(self, name: str) -> bool:
        return self.get(name).side_effecting

    def tool_definitions(self) -> list[dict[str, Any]]:
        return [fn.tool_definition() for fn in self._functions.values()]

    def argument_hash_for(self, request: FunctionCallRequest) -> str:
        """Hash usado pelo loop guard e gravado no resultado.

        Argumentos válidos são hasheados já normalizados pelo schema, então
        "123.456.789-09" e "12345678909" contam como a mesma chamada.
        """
        try:
            args = self.get(request.name).schema.model_validate(dict(request.arguments))
        except PydanticValidationError:
            return argument_hash(request.arguments)
        return _validated_hash(args)

    def local_now(self) -> datetime:
        """Agora no fuso do negócio (datas de estadia e visita)."""
        return self._clock().astimezone(self._tz)

    # ──────────────────────────────────────────────────────────────────────
    # Despacho
    # ──────────────────────────────────────────────────────────────────────

    async def dispatch(self, request: FunctionCallRequest) -> FunctionCallResult:
        """Valida argumentos e executa o handler.

        Raises:
            UnknownFunctionError: função não registrada.
        """
        fn = self.get(request.name)
        log_extra = {"tenant_id": request.tenant_id, "function_name": request.name}

        try:
            args = fn.schema.model_validate(dict(request.arguments))
        except PydanticValidationError as exc:
            arg_hash = argument_hash(request.arguments)
            log_extra["argument_hash"] = arg_hash
            errors = _field_errors(exc)
            logger.info(
                "function_arguments_rejected",
                extra={**log_extra, "fields": [e["field"] for e in errors]},
            )
            return FunctionCallResult(
                function_name=request.name,
                status=FunctionCallStatus.REJECTED_VALIDATION,
                human_summary=_clarifying_question(errors),
                errors=tuple(errors),
                argument_hash=arg_hash,
            )

        arg_hash = _validated_hash(args)
        log_extra["argument_hash"] = arg_hash
        env = HandlerEnv(services=self._services, now=self.local_now())
        try:
            result = await fn.handler(args, request, env)
        except ValidationError as exc:
            logger.info("function_validation_failed", extra=log_extra)
            return FunctionCallResult(
                function_name=request.name,
                status=FunctionCallStatus.REJECTED_VALIDATION,
                human_summary=exc.message,
                errors=tuple(exc.errors),
                argument_hash=arg_hash,
            )
        except PreconditionError as exc:
            logger.info(
                "function_precondition_failed",
                extra={**log_extra, "current_status": exc.current_status},
            )
            return FunctionCallResult(
                function_name=request.name,
                status=FunctionCallStatus.REJECTED_VALIDATION,
                payload={"current_status": exc.current_status},
                human_summary=exc.message,
                errors=({"field": "status", "message": f"status atual: {exc.current_status}"},)
                if exc.current_status
                else (),
                argument_hash=arg_hash,
            )
        except Exception as exc:
            logger.exception(
                "function_failed",
                extra={**log_extra, "error_type": type(exc).__name__},
            )
            return FunctionCallResult(
                function_name=request.name,
                status=FunctionCallStatus.FAILED,
                human_summary=GENERIC_FAILURE_SUMMARY,
                argument_hash=arg_hash,
            )

        return result.with_hash(arg_hash)


_FIELD_QUESTIONS = {
    "city": "Em qual cidade você procura o imóvel?",
    "propertyId": "Qual imóvel você quer? Posso buscar opções se me disser a cidade.",
    "checkIn": "Qual a data de entrada?",
    "checkOut": "Qual a data de saída?",
    "guests": "Quantas pessoas vão se hospedar?",
    "name": "Qual o seu nome completo?",
    "document": "Pode me informar seu CPF (ou CNPJ)?",
    "email": "Qual o seu e-mail?",
    "clientId": "Antes de reservar preciso do seu cadastro: nome completo, CPF e e-mail.",
    "date": "Qual dia você quer fazer a visita?",
    "time": "Qual horário fica bom para a visita?",
    "transactionId": "Qual o código da transação que você quer cancelar?",
    "reason": "Pode me dizer o motivo do cancelamento?",
}


def _clarifying_question(errors: list[dict[str, Any]]) -> str:
    """Pergunta de esclarecimento a partir do primeiro campo inválido."""
    for error in errors:
        root = str(error["field"]).split(".", 1)[0]
        if root in _FIELD_QUESTIONS:
            return _FIELD_QUESTIONS[root]
    return "Faltou alguma informação para eu continuar. Pode me dar mais detalhes?"
