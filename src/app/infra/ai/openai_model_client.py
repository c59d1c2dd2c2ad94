"""Cliente OpenAI do agente (tool calling)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, RateLimitError

from ai.models.agent_decision import ModelDecision, ProposedCall
from ai.prompts.sofia_prompt import build_compose_prompt, build_prompt
from ai.utils._json_extractor import extract_json_object
from app.observability.metrics import record_latency, record_token_usage
from config.settings.ai.openai import OpenAISettings, get_openai_settings
from utils.errors import ModelUnavailableError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai.models.agent_decision import CallOutcome, ModelRequest

logger = logging.getLogger(__name__)

_COMPONENT = "openai_model_client"
_TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError)


class OpenAIModelClient:
    """Implementação de ``ModelClientProtocol`` com a API de chat da OpenAI."""

    __slots__ = ("_client", "_compose", "_model", "_temperature")

    backend = "openai"

    def __init__(
        self,
        *,
        settings: OpenAISettings | None = None,
        client: AsyncOpenAI | None = None,
        compose: bool = True,
    ) -> None:
        cfg = settings or get_openai_settings()
        self._model = cfg.model
        self._temperature = cfg.temperature
        self._compose = compose
        self._client = client or AsyncOpenAI(
            api_key=cfg.api_key,
            timeout=cfg.timeout_seconds,
            max_retries=cfg.max_retries,
        )

    async def decide(self, request: ModelRequest) -> ModelDecision:
        """Pede ao modelo texto e/ou tool calls.

        Raises:
            ModelUnavailableError: falha de rede, timeout, rate limit ou 5xx.
        """
        prompt = build_prompt(request)
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": prompt.system_prompt},
                {"role": "user", "content": prompt.user_prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": 600,
        }
        if request.tools:
            kwargs["tools"] = request.tools
            kwargs["tool_choice"] = "auto"

        response = await self._create(kwargs, "decide", request.correlation_id)
        message = _first_message(response)
        if message is None:
            logger.warning("model_empty_response", extra={"component": _COMPONENT})
            return ModelDecision()

        calls: list[ProposedCall] = []
        for tool_call in getattr(message, "tool_calls", None) or []:
            function = getattr(tool_call, "function", None)
            if function is None:
                continue
            arguments = extract_json_object(function.arguments)
            if arguments is None:
                logger.warning(
                    "model_tool_arguments_unparsable",
                    extra={"component": _COMPONENT, "function_name": function.name},
                )
                arguments = {}
            calls.append(
                ProposedCall(name=function.name, arguments=arguments, call_id=tool_call.id)
            )

        return ModelDecision(reply_text=(message.content or "").strip(), function_calls=calls)

    async def compose_reply(
        self,
        request: ModelRequest,
        outcomes: Sequence[CallOutcome],
    ) -> str | None:
        """Segunda passada: redige a resposta a partir dos resultados.

        Falhas aqui não derrubam o turno: retorna None e o orquestrador usa
        os resumos das funções.
        """
        if not self._compose or not outcomes:
            return None
        prompt = build_prompt(request)
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": prompt.system_prompt},
                {"role": "user", "content": prompt.user_prompt},
                {"role": "user", "content": build_compose_prompt(outcomes)},
            ],
            "temperature": self._temperature,
            "max_tokens": 400,
        }
        try:
            response = await self._create(kwargs, "compose_reply", request.correlation_id)
        except ModelUnavailableError:
            logger.warning("model_compose_unavailable", extra={"component": _COMPONENT})
            return None
        message = _first_message(response)
        text = (message.content or "").strip() if message is not None else ""
        return text or None

    async def _create(
        self,
        kwargs: dict[str, Any],
        operation: str,
        correlation_id: str | None,
    ) -> Any:
        started = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except _TRANSIENT_ERRORS as exc:
            logger.warning(
                "model_call_failed",
                extra={
                    "component": _COMPONENT,
                    "operation": operation,
                    "error_type": type(exc).__name__,
                },
            )
            raise ModelUnavailableError(f"OpenAI indisponível: {type(exc).__name__}") from exc
        except APIStatusError as exc:
            logger.warning(
                "model_call_rejected",
                extra={
                    "component": _COMPONENT,
                    "operation": operation,
                    "status_code": exc.status_code,
                },
            )
            raise ModelUnavailableError(f"OpenAI retornou {exc.status_code}") from exc

        record_latency(
            _COMPONENT,
            operation,
            (time.perf_counter() - started) * 1000,
            correlation_id=correlation_id,
        )
        usage = getattr(response, "usage", None)
        if usage is not None:
            record_token_usage(
                _COMPONENT,
                operation,
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
                correlation_id=correlation_id,
            )
        return response


def _first_message(response: Any) -> Any | None:
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    return choices[0].message
