"""Testes do cliente de modelo determinístico."""

from __future__ import annotations

import pytest

from ai.core.heuristic_client import DEFAULT_CANCEL_REASON, HeuristicModelClient
from ai.models.agent_decision import ModelDecision, ModelRequest
from ai.rules.fallbacks import default_reply


def _request(text: str, **overrides: object) -> ModelRequest:
    data: dict[str, object] = {
        "tenant_id": "tenant-a",
        "user_message": text,
        "today": "2025-06-01",
        "history": ["Cliente: oi"],
    }
    data.update(overrides)
    return ModelRequest(**data)


async def _decide(text: str, **overrides: object) -> ModelDecision:
    return await HeuristicModelClient().decide(_request(text, **overrides))


def _calls(decision: ModelDecision) -> list[tuple[str, dict]]:
    return [(call.name, call.arguments) for call in decision.function_calls]


class TestReplies:
    @pytest.mark.asyncio
    async def test_greeting_on_first_message(self) -> None:
        decision = await _decide("oi", history=[], agent_name="Sofia")
        assert not decision.has_calls
        assert "Sofia" in decision.reply_text

    @pytest.mark.asyncio
    async def test_unrecognized_message_gets_default_reply(self) -> None:
        decision = await _decide("hmm")
        assert decision.reply_text == default_reply()

    @pytest.mark.asyncio
    async def test_compose_reply_is_not_supported(self) -> None:
        client = HeuristicModelClient()
        assert await client.compose_reply(_request("oi"), []) is None


class TestSearchAndPrice:
    @pytest.mark.asyncio
    async def test_search(self) -> None:
        decision = await _decide("Quero alugar uma casa em Florianópolis para 4 pessoas")
        assert _calls(decision) == [
            ("search_properties", {"city": "Florianópolis", "guests": 4}),
        ]

    @pytest.mark.asyncio
    async def test_search_with_dates_also_prices(self) -> None:
        decision = await _decide(
            "Quero alugar em Florianópolis para 4 pessoas de 10/07 a 15/07"
        )
        assert _calls(decision) == [
            ("search_properties", {"city": "Florianópolis", "guests": 4}),
            (
                "calculate_price",
                {"checkIn": "2025-07-10", "checkOut": "2025-07-15", "guests": 4},
            ),
        ]

    @pytest.mark.asyncio
    async def test_price_question_with_candidates(self) -> None:
        decision = await _decide("quanto fica?", candidate_count=2)
        assert _calls(decision) == [("calculate_price", {})]


class TestReferencesAndMedia:
    @pytest.mark.asyncio
    async def test_photos_and_videos_of_second_option(self) -> None:
        decision = await _decide("me manda fotos e vídeos do segundo", candidate_count=3)
        assert _calls(decision) == [
            ("send_property_media", {"propertyId": "2", "mediaType": "both"}),
        ]

    @pytest.mark.asyncio
    async def test_last_option_uses_candidate_count(self) -> None:
        decision = await _decide("quero ver fotos do último", candidate_count=3)
        assert _calls(decision) == [
            ("send_property_media", {"propertyId": "3", "mediaType": "photos"}),
        ]

    @pytest.mark.asyncio
    async def test_visit(self) -> None:
        decision = await _decide("quero visitar o primeiro amanhã às 14h", candidate_count=2)
        assert _calls(decision) == [
            (
                "schedule_visit",
                {"propertyId": "1", "date": "2025-06-02", "time": "14:00"},
            ),
        ]

    @pytest.mark.asyncio
    async def test_visit_without_time_asks_free_slots(self) -> None:
        decision = await _decide("posso visitar o segundo amanhã?", candidate_count=2)
        assert _calls(decision) == [
            ("check_visit_availability", {"date": "2025-06-02", "propertyId": "2"}),
        ]


class TestBookingFlow:
    @pytest.mark.asyncio
    async def test_registration_with_pending_quote_also_reserves(self) -> None:
        decision = await _decide(
            "Meu nome é Ana Souza, CPF 123.456.789-09, email ana@example.com",
            has_pending_quote=True,
        )
        assert _calls(decision) == [
            (
                "register_client",
                {"name": "Ana Souza", "document": "12345678909", "email": "ana@example.com"},
            ),
            ("create_reservation", {}),
        ]

    @pytest.mark.asyncio
    async def test_registration_without_quote_only_registers(self) -> None:
        decision = await _decide("email ana@example.com")
        assert [name for name, _ in _calls(decision)] == ["register_client"]

    @pytest.mark.asyncio
    async def test_confirmation_reserves_pending_quote(self) -> None:
        decision = await _decide("sim, pode reservar", has_pending_quote=True)
        assert _calls(decision) == [("create_reservation", {})]


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_with_reason(self) -> None:
        decision = await _decide("Quero cancelar o pagamento tx-1001 porque mudei de planos")
        assert _calls(decision) == [
            (
                "cancel_payment",
                {
                    "transactionId": "tx-1001",
                    "reason": "mudei de planos",
                    "cancelledBy": "client",
                },
            ),
        ]

    @pytest.mark.asyncio
    async def test_cancel_without_reason_uses_default(self) -> None:
        decision = await _decide("cancela o pagamento tx-1001")
        [(name, arguments)] = _calls(decision)
        assert name == "cancel_payment"
        assert arguments["reason"] == DEFAULT_CANCEL_REASON

    @pytest.mark.asyncio
    async def test_cancel_without_id_leaves_it_for_validation(self) -> None:
        decision = await _decide("quero cancelar o pagamento")
        [(name, arguments)] = _calls(decision)
        assert name == "cancel_payment"
        assert "transactionId" not in arguments
