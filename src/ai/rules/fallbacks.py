"""Respostas determinísticas do agente.

Usadas quando o turno falha, quando a entrada é vazia e quando uma ação
repetida é suprimida. Os textos ficam em ``prompts/yaml/replies.yaml``.
"""

from __future__ import annotations

from ai.config.prompt_assets_loader import load_text_table

_REPLIES_YAML = "replies.yaml"


def _reply(key: str) -> str:
    return load_text_table(_REPLIES_YAML, "replies")[key]


def greeting_reply(agent_name: str = "Sofia") -> str:
    return _reply("greeting").format(agent_name=agent_name)


def empty_input_reply() -> str:
    return _reply("empty_input")


def turn_failed_reply() -> str:
    """Resposta segura quando o turno falha (nada foi salvo)."""
    return _reply("turn_failed")


def unknown_function_reply() -> str:
    return _reply("unknown_function")


def default_reply() -> str:
    return _reply("fallback")


def duplicate_ack(function_name: str) -> str:
    """Confirmação para ação suprimida por ter sido executada há pouco."""
    acks = load_text_table(_REPLIES_YAML, "duplicate_acks")
    return acks.get(function_name, acks["default"])
