"""Prompt da assistente Sofia.

Nenhuma string de prompt vive em `.py`; tudo é carregado de YAML.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, NamedTuple

from ai.config.prompt_assets_loader import load_prompt_yaml

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai.models.agent_decision import CallOutcome, ModelRequest

_PROMPT_YAML = "sofia_agent.yaml"

_MAX_USER_MESSAGE_CHARS = 800
_MAX_HISTORY_CHARS = 1600
_MAX_CONTEXT_CHARS = 1200


class PromptComponents(NamedTuple):
    system_prompt: str
    user_prompt: str


def build_prompt(request: ModelRequest) -> PromptComponents:
    """Monta SYSTEM + USER a partir do request do turno."""
    assets = load_prompt_yaml(_PROMPT_YAML)
    system_prompt = assets["system_prompt"].format(
        agent_name=request.agent_name,
        today=request.today or "(não informado)",
        lead_temperature=request.lead_temperature,
    )
    history = "\n".join(request.history)[-_MAX_HISTORY_CHARS:]
    user_prompt = assets["template"].format(
        context_summary=(request.context_summary or "(vazio)")[:_MAX_CONTEXT_CHARS],
        conversation_history=history or "(sem histórico)",
        user_message=(request.user_message or "")[:_MAX_USER_MESSAGE_CHARS],
    )
    return PromptComponents(system_prompt=system_prompt, user_prompt=user_prompt)


def build_compose_prompt(outcomes: Sequence[CallOutcome]) -> str:
    """Prompt da segunda passada com os resultados das funções."""
    instructions = load_prompt_yaml(_PROMPT_YAML)["compose_instructions"].strip()
    lines = [
        json.dumps(
            {"function": o.name, "status": o.status, "summary": o.summary},
            ensure_ascii=False,
        )
        for o in outcomes
    ]
    return instructions + "\n\n" + "\n".join(lines)
