"""Regras determinísticas do módulo AI (classificação e respostas prontas)."""

from ai.rules.fallbacks import (
    default_reply,
    duplicate_ack,
    empty_input_reply,
    greeting_reply,
    turn_failed_reply,
    unknown_function_reply,
)
from ai.rules.lead_classifier import classify, detect_signals

__all__ = [
    "classify",
    "default_reply",
    "detect_signals",
    "duplicate_ack",
    "empty_input_reply",
    "greeting_reply",
    "turn_failed_reply",
    "unknown_function_reply",
]
