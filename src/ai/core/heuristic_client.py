"""Cliente de modelo determinístico (sem LLM).

Interpreta a mensagem com palavras-chave e regex em português e propõe
chamadas de função com argumentos parciais; o orquestrador completa o
que faltar a partir do contexto. Usado em desenvolvimento, testes e
como backend padrão quando não há chave da OpenAI.
"""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING, Any

from ai.models.agent_decision import ModelDecision, ModelRequest, ProposedCall
from ai.rules.fallbacks import default_reply, greeting_reply
from ai.services.message_extractor import (
    extract_amenities,
    extract_city,
    extract_client_data,
    extract_guests,
    extract_ordinal,
    extract_reason,
    extract_transaction_id,
)
from ai.utils.date_extraction import extract_date_range, extract_single_date, extract_time
from utils.text import normalize_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai.models.agent_decision import CallOutcome

_GREETINGS = re.compile(r"^(?:oi+|ola|bom dia|boa tarde|boa noite|e ai|hey|opa)\b")
_CANCEL = re.compile(r"\bcancel\w*")
_PAYMENT = re.compile(r"\b(?:pagamento|transacao|cobranca|pix|boleto)\b")
_VISIT = re.compile(r"\b(?:visita\w*|conhecer o imovel|ver pessoalmente)\b")
_MEDIA = re.compile(r"\b(?:fotos?|videos?|imagens?)\b")
_VIDEO = re.compile(r"\bvideos?\b")
_PHOTO = re.compile(r"\b(?:fotos?|imagens?)\b")
_RESERVE = re.compile(r"\b(?:reserv\w*|fechar|fechado|pode fazer|quero fechar)\b")
_CONFIRM = re.compile(r"^(?:sim|isso|confirmo|pode ser|fechado|bora|quero sim|ok)\b")
_PRICE = re.compile(r"\b(?:quanto|preco|valor|custa|orcamento|cota\w*)\b")
_DETAILS = re.compile(r"\b(?:detalhes?|mais sobre|me fala mais|como e o|como e a)\b")
_SEARCH = re.compile(
    r"\b(?:alugar|aluguel|temporada|imove\w*|casas?|apartamentos?|apto|hospedagem|"
    r"procuro|procurando|busca\w*|opcoes)\b"
)

DEFAULT_CANCEL_REASON = "Solicitado pelo cliente"


def _today(request: ModelRequest) -> date:
    if request.today:
        return date.fromisoformat(request.today)
    return date.today()


def _call(function_name: str, /, **arguments: Any) -> ProposedCall:
    return ProposedCall(
        name=function_name,
        arguments={key: value for key, value in arguments.items() if value not in (None, [], "")},
    )


def _property_ref(text: str, request: ModelRequest) -> str | None:
    """Referência ordinal ("o primeiro", "opção 2") vira "1", "2"..."""
    position = extract_ordinal(text)
    if position is None:
        return None
    if position == -1:
        return str(request.candidate_count) if request.candidate_count else None
    return str(position)


class HeuristicModelClient:
    """Implementação determinística de ``ModelClientProtocol``."""

    backend = "heuristic"

    async def decide(self, request: ModelRequest) -> ModelDecision:
        text = request.user_message
        normalized = normalize_text(text)
        calls = self._propose(text, normalized, request)
        if calls:
            return ModelDecision(function_calls=calls)
        if _GREETINGS.search(normalized) or not request.history:
            return ModelDecision(reply_text=greeting_reply(request.agent_name))
        return ModelDecision(reply_text=default_reply())

    async def compose_reply(
        self,
        request: ModelRequest,
        outcomes: Sequence[CallOutcome],
    ) -> str | None:
        return None

    def _propose(
        self,
        text: str,
        normalized: str,
        request: ModelRequest,
    ) -> list[ProposedCall]:
        today = _today(request)
        property_ref = _property_ref(text, request)

        if _CANCEL.search(normalized) and (
            _PAYMENT.search(normalized) or extract_transaction_id(text)
        ):
            return [
                _call(
                    "cancel_payment",
                    transactionId=extract_transaction_id(text),
                    reason=extract_reason(text) or DEFAULT_CANCEL_REASON,
                    cancelledBy="client",
                )
            ]

        client = extract_client_data(text)
        if client.email or client.document:
            calls = [
                _call(
                    "register_client",
                    name=client.name,
                    document=client.document,
                    email=client.email,
                )
            ]
            if request.has_pending_quote and client.complete:
                calls.append(_call("create_reservation"))
            return calls

        if _VISIT.search(normalized):
            visit_day = extract_single_date(text, today)
            visit_time = extract_time(text)
            if visit_day is not None and visit_time is None:
                return [
                    _call(
                        "check_visit_availability",
                        date=visit_day.isoformat(),
                        propertyId=property_ref,
                    )
                ]
            return [
                _call(
                    "schedule_visit",
                    propertyId=property_ref,
                    date=visit_day.isoformat() if visit_day else None,
                    time=visit_time,
                )
            ]

        if _MEDIA.search(normalized):
            wants_video = bool(_VIDEO.search(normalized))
            wants_photo = bool(_PHOTO.search(normalized))
            media_type = "both" if wants_video and wants_photo else (
                "videos" if wants_video else "photos"
            )
            return [_call("send_property_media", propertyId=property_ref, mediaType=media_type)]

        stay = extract_date_range(text, today)
        guests = extract_guests(text)

        if _RESERVE.search(normalized) or (
            request.has_pending_quote and _CONFIRM.search(normalized)
        ):
            if stay is None and not request.has_pending_quote and request.candidate_count:
                # sem datas nem cotação: pede o cálculo primeiro
                return [_call("calculate_price", propertyId=property_ref, guests=guests)]
            return [
                _call(
                    "create_reservation",
                    propertyId=property_ref,
                    checkIn=stay.check_in.isoformat() if stay else None,
                    checkOut=stay.check_out.isoformat() if stay else None,
                    guests=guests,
                )
            ]

        city = extract_city(text)
        if city and (_SEARCH.search(normalized) or guests or not request.candidate_count):
            calls = [
                _call(
                    "search_properties",
                    city=city,
                    guests=guests,
                    amenities=extract_amenities(text),
                )
            ]
            if stay is not None:
                calls.append(
                    _call(
                        "calculate_price",
                        checkIn=stay.check_in.isoformat(),
                        checkOut=stay.check_out.isoformat(),
                        guests=guests,
                    )
                )
            return calls

        if stay is not None or (_PRICE.search(normalized) and request.candidate_count):
            return [
                _call(
                    "calculate_price",
                    propertyId=property_ref,
                    checkIn=stay.check_in.isoformat() if stay else None,
                    checkOut=stay.check_out.isoformat() if stay else None,
                    guests=guests,
                )
            ]

        if property_ref or _DETAILS.search(normalized):
            return [_call("get_property_details", propertyId=property_ref)]

        if _SEARCH.search(normalized):
            return [
                _call(
                    "search_properties",
                    city=city,
                    guests=guests,
                    amenities=extract_amenities(text),
                )
            ]
        return []
