"""Agregador de settings do agente Sofia.

Organização por domínio (base, agent, ai) para isolar mudanças.
"""

from __future__ import annotations

from config.settings.agent import (
    AgentSettings,
    LoopGuardSettings,
    LoopWindow,
    ModelBackend,
    get_agent_settings,
    get_loop_guard_settings,
)
from config.settings.ai import (
    OpenAISettings,
    get_openai_settings,
)
from config.settings.base import (
    BaseSettings,
    ContextSettings,
    ContextStoreBackend,
    Environment,
    get_base_settings,
    get_context_settings,
)

__all__ = [
    "AgentSettings",
    "BaseSettings",
    "ContextSettings",
    "ContextStoreBackend",
    "Environment",
    "LoopGuardSettings",
    "LoopWindow",
    "ModelBackend",
    "OpenAISettings",
    "get_agent_settings",
    "get_base_settings",
    "get_context_settings",
    "get_loop_guard_settings",
    "get_openai_settings",
    "validate_all_settings",
]


def validate_all_settings() -> list[str]:
    """Valida todos os grupos de settings relevantes ao backend ativo.

    Returns:
        Lista agregada de erros (vazia = OK).
    """
    base = get_base_settings()
    context = get_context_settings()
    agent = get_agent_settings()
    loop_guard = get_loop_guard_settings()
    errors = [
        *base.validate(),
        *context.validate(base),
        *agent.validate(),
        *loop_guard.validate(),
    ]
    if context.max_function_calls < loop_guard.max_window_calls:
        errors.append(
            "CONTEXT_MAX_FUNCTION_CALLS menor que a maior janela do loop guard "
            f"({loop_guard.max_window_calls})"
        )
    if agent.model_backend == "openai":
        errors.extend(get_openai_settings().validate())
    return errors
