"""Prompts do agente (textos em YAML, montagem em Python)."""

from ai.prompts.sofia_prompt import PromptComponents, build_compose_prompt, build_prompt

__all__ = ["PromptComponents", "build_compose_prompt", "build_prompt"]
