"""Completa argumentos propostos pelo modelo com dados do contexto.

Ordem de preenchimento de ``propertyId``: referência ordinal ("1",
"primeiro", "segunda") resolvida em ``candidate_properties``; se ausente,
imóvel da cotação pendente; depois o primeiro candidato. Funções em que o
imóvel é opcional só têm a referência resolvida, sem valor padrão.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from utils.text import normalize_text

if TYPE_CHECKING:
    from app.sessions.context import ConversationContext, PropertySummary

_PROPERTY_FUNCTIONS = frozenset({
    "calculate_price",
    "get_property_details",
    "send_property_media",
    "create_reservation",
    "schedule_visit",
})

_ORDINAL_WORDS = {
    "primeiro": 1,
    "primeira": 1,
    "segundo": 2,
    "segunda": 2,
    "terceiro": 3,
    "terceira": 3,
    "quarto": 4,
    "quarta": 4,
    "quinto": 5,
    "quinta": 5,
}

_ORDINAL_PATTERN = re.compile(r"^(?:o |a |opcao |numero |imovel |#)?(\d{1,2}|[a-z]+)(?:o|a)?$")


def _ordinal_index(value: str) -> int | None:
    normalized = normalize_text(value)
    match = _ORDINAL_PATTERN.match(normalized)
    if not match:
        return None
    token = match.group(1)
    if token.isdigit():
        return int(token)
    return _ORDINAL_WORDS.get(token)


def resolve_property_ref(value: Any, candidates: list[PropertySummary]) -> Any:
    """Traduz referência ordinal para o id do candidato correspondente.

    Ids reais (que não são posições válidas) passam sem alteração.
    """
    if not isinstance(value, str | int) or not candidates:
        return value
    text = str(value).strip()
    if any(c.property_id == text for c in candidates):
        return text
    index = _ordinal_index(text)
    if index is not None and 1 <= index <= len(candidates):
        return candidates[index - 1].property_id
    return value


def fill_arguments(
    name: str,
    arguments: Mapping[str, Any],
    context: ConversationContext,
) -> dict[str, Any]:
    """Argumentos completos para a chamada ``name``.

    Args:
        name: Função proposta
        arguments: Argumentos crus do modelo
        context: Contexto do turno

    Returns:
        Novo dict (o original não é alterado).
    """
    filled = {key: value for key, value in arguments.items() if value not in (None, "")}
    quote = context.pending_quote

    if "propertyId" in filled:
        filled["propertyId"] = resolve_property_ref(
            filled["propertyId"], context.candidate_properties
        )
    elif name in _PROPERTY_FUNCTIONS:
        if quote is not None:
            filled["propertyId"] = quote.property_id
        elif context.candidate_properties:
            filled["propertyId"] = context.candidate_properties[0].property_id

    if name == "calculate_price" and "guests" not in filled:
        if context.search_criteria and context.search_criteria.guests:
            filled["guests"] = context.search_criteria.guests
        elif quote is not None and quote.property_id == filled.get("propertyId"):
            filled["guests"] = quote.guest_count

    if name == "create_reservation":
        if quote is not None and quote.property_id == filled.get("propertyId"):
            filled.setdefault("checkIn", quote.check_in.isoformat())
            filled.setdefault("checkOut", quote.check_out.isoformat())
            filled.setdefault("guests", quote.guest_count)
        if "clientId" not in filled and context.registered_client is not None:
            filled["clientId"] = context.registered_client.client_id

    return filled
