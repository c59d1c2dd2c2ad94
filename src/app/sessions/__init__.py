"""Contexto de conversa por (tenant, telefone) e seu store."""

from app.sessions.context import (
    ConversationContext,
    FunctionCallRecord,
    PropertySummary,
    RegisteredClient,
    SearchCriteria,
)
from app.sessions.context_store import ContextStore, hash_phone
from app.sessions.history import Turn, TurnRole

__all__ = [
    "ContextStore",
    "ConversationContext",
    "FunctionCallRecord",
    "PropertySummary",
    "RegisteredClient",
    "SearchCriteria",
    "Turn",
    "TurnRole",
    "hash_phone",
]
