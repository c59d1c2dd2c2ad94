"""Testes do preenchimento de argumentos a partir do contexto."""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.pricing import PriceQuote
from app.sessions.context import (
    ConversationContext,
    PropertySummary,
    RegisteredClient,
    SearchCriteria,
)
from app.use_cases.agent._argument_filling import fill_arguments, resolve_property_ref

CANDIDATES = [
    PropertySummary("prop-a", "Casa A", "Florianópolis", 35000, 4),
    PropertySummary("prop-b", "Casa B", "Florianópolis", 52000, 6),
]


def _context(**fields: object) -> ConversationContext:
    return ConversationContext(tenant_id="tenant-a", customer_phone="+5548999990000", **fields)


def _quote(property_id: str = "prop-b") -> PriceQuote:
    return PriceQuote(
        property_id=property_id,
        check_in=date(2025, 7, 10),
        check_out=date(2025, 7, 15),
        nights=5,
        guest_count=3,
        base_amount=52000,
        cleaning_fee=0,
        extra_guest_fee=0,
        total_amount=260000,
    )


class TestResolvePropertyRef:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1", "prop-a"),
            (2, "prop-b"),
            ("segunda", "prop-b"),
            ("a primeira", "prop-a"),
            ("opção 2", "prop-b"),
            ("prop-b", "prop-b"),
        ],
    )
    def test_references(self, value: object, expected: str) -> None:
        assert resolve_property_ref(value, CANDIDATES) == expected

    def test_out_of_range_passes_through(self) -> None:
        assert resolve_property_ref("7", CANDIDATES) == "7"

    def test_without_candidates(self) -> None:
        assert resolve_property_ref("1", []) == "1"


class TestFillArguments:
    def test_property_from_pending_quote_before_candidates(self) -> None:
        context = _context(candidate_properties=list(CANDIDATES), pending_quote=_quote())
        filled = fill_arguments("send_property_media", {}, context)
        assert filled["propertyId"] == "prop-b"

    def test_property_from_first_candidate(self) -> None:
        context = _context(candidate_properties=list(CANDIDATES))
        assert fill_arguments("get_property_details", {}, context) == {"propertyId": "prop-a"}

    def test_guests_from_last_search(self) -> None:
        context = _context(
            candidate_properties=list(CANDIDATES),
            search_criteria=SearchCriteria(city="Florianópolis", guests=4),
        )
        filled = fill_arguments(
            "calculate_price", {"checkIn": "2025-07-10", "checkOut": "2025-07-12"}, context
        )
        assert filled["guests"] == 4

    def test_reservation_filled_from_quote_and_client(self) -> None:
        context = _context(
            pending_quote=_quote(),
            registered_client=RegisteredClient("cli_1", "Ana Souza", "12345678909", "a@b.com"),
        )

        filled = fill_arguments("create_reservation", {"guests": None}, context)

        assert filled == {
            "propertyId": "prop-b",
            "checkIn": "2025-07-10",
            "checkOut": "2025-07-15",
            "guests": 3,
            "clientId": "cli_1",
        }

    def test_explicit_arguments_win(self) -> None:
        context = _context(pending_quote=_quote())
        filled = fill_arguments(
            "create_reservation",
            {"propertyId": "prop-b", "checkIn": "2025-08-01", "checkOut": "2025-08-03"},
            context,
        )
        assert filled["checkIn"] == "2025-08-01"

    def test_original_mapping_untouched(self) -> None:
        arguments = {"city": "Florianópolis"}
        fill_arguments("search_properties", arguments, _context())
        assert arguments == {"city": "Florianópolis"}
