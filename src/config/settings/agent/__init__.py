"""Agregador de settings do agente."""

from __future__ import annotations

from config.settings.agent.agent import (
    AgentSettings,
    ModelBackend,
    get_agent_settings,
)
from config.settings.agent.loop_guard import (
    LoopGuardSettings,
    LoopWindow,
    get_loop_guard_settings,
    parse_overrides,
)

__all__ = [
    "AgentSettings",
    "LoopGuardSettings",
    "LoopWindow",
    "ModelBackend",
    "get_agent_settings",
    "get_loop_guard_settings",
    "parse_overrides",
]
