"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.context import (
    ContextSettings,
    ContextStoreBackend,
    get_context_settings,
)
from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)

__all__ = [
    "BaseSettings",
    "ContextSettings",
    "ContextStoreBackend",
    "Environment",
    "get_base_settings",
    "get_context_settings",
]
