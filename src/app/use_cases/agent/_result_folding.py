"""Aplica resultados de funções ao contexto do turno."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from app.domain.pricing import PriceQuote, format_brl, format_date_br
from app.sessions.context import (
    FunctionCallRecord,
    PropertySummary,
    RegisteredClient,
    SearchCriteria,
)

if TYPE_CHECKING:
    from datetime import datetime

    from app.domain.function_call import FunctionCallResult
    from app.sessions.context import ConversationContext
    from app.sessions.context_store import ContextStore

logger = logging.getLogger(__name__)


def record_for(
    result: FunctionCallResult,
    *,
    side_effecting: bool,
    executed_at: datetime,
) -> FunctionCallRecord:
    return FunctionCallRecord(
        function_name=result.function_name,
        argument_hash=result.argument_hash,
        executed_at=executed_at,
        result_summary=result.human_summary[:200],
        side_effecting=side_effecting,
    )


def fold_result(
    store: ContextStore,
    context: ConversationContext,
    result: FunctionCallResult,
    *,
    side_effecting: bool,
    executed_at: datetime,
) -> None:
    """Incorpora um resultado ao contexto.

    Só chamadas executadas entram em ``recent_function_calls``. Cotação
    rejeitada deixa a cotação pendente como estava.
    """
    if not result.executed:
        return

    store.append_function_call(
        context,
        record_for(result, side_effecting=side_effecting, executed_at=executed_at),
    )
    payload = result.payload

    if result.function_name == "search_properties":
        store.set_candidate_properties(
            context,
            [PropertySummary.from_dict(item) for item in payload.get("properties", [])],
        )
        store.set_search_criteria(
            context,
            SearchCriteria(
                city=payload.get("city", ""),
                guests=payload.get("guests"),
                amenities=tuple(payload.get("amenities") or ()),
            ),
        )
    elif result.function_name == "calculate_price" and "quote" in payload:
        store.set_pending_quote(context, PriceQuote.from_dict(payload["quote"]))
    elif result.function_name == "register_client":
        store.set_registered_client(
            context,
            RegisteredClient(
                client_id=payload["client_id"],
                name=payload.get("name", ""),
                document=payload.get("document", ""),
                email=payload.get("email", ""),
            ),
        )
    elif result.function_name == "create_reservation":
        quote = context.pending_quote
        if quote is not None and quote.matches(
            payload.get("property_id", ""),
            date.fromisoformat(payload["check_in"]),
            date.fromisoformat(payload["check_out"]),
        ):
            store.set_pending_quote(context, None)


def summarize_context(context: ConversationContext) -> str:
    """Resumo textual do contexto para o modelo (sem PII)."""
    lines: list[str] = []
    if context.candidate_properties:
        lines.append("Imóveis em exibição:")
        for index, item in enumerate(context.candidate_properties, start=1):
            lines.append(
                f"{index}. [{item.property_id}] {item.title} ({item.city}), "
                f"{format_brl(item.nightly_rate)}/noite, até {item.max_guests} hóspedes"
            )
    if context.search_criteria is not None:
        criteria = context.search_criteria
        guests = f", {criteria.guests} hóspedes" if criteria.guests else ""
        lines.append(f"Última busca: {criteria.city}{guests}")
    if context.pending_quote is not None:
        quote = context.pending_quote
        lines.append(
            f"Cotação pendente: imóvel {quote.property_id}, "
            f"{format_date_br(quote.check_in)} a {format_date_br(quote.check_out)}, "
            f"{quote.guest_count} hóspede(s), total {format_brl(quote.total_amount)}"
        )
    if context.registered_client is not None:
        lines.append(f"Cliente cadastrado: {context.registered_client.client_id}")
    return "\n".join(lines)
