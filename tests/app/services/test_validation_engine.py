"""Testes do validation_engine (datas, preço e horário de visita)."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, timezone

import pytest

from app.domain.booking import Reservation, Visit
from app.domain.pricing import format_brl
from app.domain.property import Property, PropertyPricing
from app.services.validation_engine import (
    calculate_quote,
    describe_quote,
    free_visit_slots,
    nights_between,
    parse_visit_time,
    shift_to_next_occurrence,
    unavailable_nights,
    validate_stay_dates,
    validate_visit_datetime,
    visit_conflicts,
)
from utils.errors import ValidationError

TODAY = date(2025, 6, 1)
BRT = timezone(timedelta(hours=-3))


def _property(**pricing: int) -> Property:
    values = {
        "base_nightly": 35000,
        "cleaning_fee": 12000,
        "extra_guest_fee": 5000,
        "included_guests": 2,
        "minimum_nights": 2,
    }
    values.update(pricing)
    return Property(
        id="prop-1",
        tenant_id="t1",
        title="Casa na Lagoa",
        city="Florianópolis",
        max_guests=4,
        pricing=PropertyPricing(**values),
    )


class TestValidateStayDates:
    def test_future_range_ok(self) -> None:
        result = validate_stay_dates(date(2025, 7, 10), date(2025, 7, 15), TODAY)
        assert result.ok is True
        assert result.suggestion_text == ""

    def test_check_out_before_check_in_is_definitive_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_stay_dates(date(2025, 7, 15), date(2025, 7, 10), TODAY)
        assert exc_info.value.errors[0]["field"] == "checkOut"

    def test_same_day_is_error(self) -> None:
        with pytest.raises(ValidationError):
            validate_stay_dates(date(2025, 7, 10), date(2025, 7, 10), TODAY)

    def test_past_check_in_suggests_next_year(self) -> None:
        """Entrada no passado devolve sugestão, mantendo a duração."""
        result = validate_stay_dates(date(2024, 1, 1), date(2024, 1, 5), TODAY)
        assert result.ok is False
        assert result.suggested_check_in == date(2026, 1, 1)
        assert result.suggested_check_out == date(2026, 1, 5)
        assert result.suggestion_text == "01/01/2026 a 05/01/2026"

    def test_check_in_today_is_ok(self) -> None:
        assert validate_stay_dates(TODAY, TODAY + timedelta(days=2), TODAY).ok is True

    def test_shift_across_year_boundary_keeps_stay(self) -> None:
        check_in, check_out = shift_to_next_occurrence(
            date(2024, 12, 30), date(2025, 1, 3), TODAY
        )
        assert check_in == date(2025, 12, 30)
        assert check_out == date(2026, 1, 3)

    def test_shift_leap_day(self) -> None:
        check_in, _ = shift_to_next_occurrence(date(2024, 2, 29), date(2024, 3, 2), TODAY)
        assert check_in == date(2026, 2, 28)


class TestCalculateQuote:
    def test_total_with_cleaning_fee(self) -> None:
        quote = calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 15), 2)
        assert quote.nights == 5
        assert quote.extra_guest_fee == 0
        assert quote.total_amount == 35000 * 5 + 12000

    def test_extra_guests_charged_per_night(self) -> None:
        quote = calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 13), 4)
        assert quote.extra_guest_fee == 2 * 5000 * 3
        assert quote.total_amount == 35000 * 3 + 12000 + 30000

    def test_total_is_exact_in_cents(self) -> None:
        quote = calculate_quote(
            _property(base_nightly=33333, cleaning_fee=1, minimum_nights=1),
            date(2025, 7, 1),
            date(2025, 7, 4),
            1,
        )
        assert quote.total_amount == 100000
        assert format_brl(quote.total_amount) == "R$ 1.000,00"

    def test_guests_above_capacity(self) -> None:
        with pytest.raises(ValidationError, match="máximo de hóspedes"):
            calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 15), 5)

    def test_minimum_nights(self) -> None:
        with pytest.raises(ValidationError, match="Estadia mínima de 2 noites"):
            calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 11), 2)

    def test_zero_guests(self) -> None:
        with pytest.raises(ValidationError):
            calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 15), 0)

    def test_describe_quote_lists_breakdown(self) -> None:
        quote = calculate_quote(_property(), date(2025, 7, 10), date(2025, 7, 15), 3)
        text = describe_quote(quote, "Casa na Lagoa")
        assert "10/07/2025 a 15/07/2025 (5 noites, 3 hóspedes)" in text
        assert "Taxa de limpeza: R$ 120,00" in text
        assert f"Total: {format_brl(quote.total_amount)}" in text

    def test_nights_between(self) -> None:
        assert nights_between(date(2025, 12, 30), date(2026, 1, 2)) == 3


class TestVisitTime:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("14:30", time(14, 30)), ("9h", time(9, 0)), ("10h15", time(10, 15)), ("18:00", time(18))],
    )
    def test_parse_valid(self, raw: str, expected: time) -> None:
        assert parse_visit_time(raw) == expected

    @pytest.mark.parametrize("raw", ["7:59", "18:01", "22h"])
    def test_outside_business_hours(self, raw: str) -> None:
        with pytest.raises(ValidationError, match="entre 8h e 18h"):
            parse_visit_time(raw)

    @pytest.mark.parametrize("raw", ["", "meio-dia", "25:00"])
    def test_invalid_format(self, raw: str) -> None:
        with pytest.raises(ValidationError):
            parse_visit_time(raw)

    def test_visit_in_past_rejected(self) -> None:
        now = datetime(2025, 6, 1, 12, 0, tzinfo=BRT)
        with pytest.raises(ValidationError, match="já passou"):
            validate_visit_datetime(date(2025, 6, 1), "10:00", now)

    def test_visit_later_today_accepted(self) -> None:
        now = datetime(2025, 6, 1, 12, 0, tzinfo=BRT)
        scheduled = validate_visit_datetime(date(2025, 6, 1), "15:00", now)
        assert scheduled == datetime(2025, 6, 1, 15, 0, tzinfo=BRT)
        assert scheduled.astimezone(UTC).hour == 18


def _reservation(check_in: date, check_out: date, status: str = "pending") -> Reservation:
    return Reservation(
        id="res-1",
        tenant_id="t1",
        property_id="prop-1",
        client_id="cli-1",
        check_in=check_in,
        check_out=check_out,
        guests=2,
        total_amount=100000,
        status=status,
        created_at=datetime(2025, 6, 1, tzinfo=UTC),
    )


def _visit(hour: int, minute: int = 0, status: str = "scheduled") -> Visit:
    return Visit(
        id=f"vis-{hour}{minute}",
        tenant_id="t1",
        property_id="prop-1",
        client_phone="+5548999990000",
        scheduled_for=datetime(2025, 6, 2, hour, minute, tzinfo=BRT),
        status=status,
    )


class TestUnavailableNights:
    def test_reserved_nights_in_order(self) -> None:
        nights = unavailable_nights(
            _property(),
            date(2025, 7, 8),
            date(2025, 7, 12),
            [_reservation(date(2025, 7, 10), date(2025, 7, 15))],
        )
        assert nights == [date(2025, 7, 10), date(2025, 7, 11)]

    def test_check_out_day_is_free(self) -> None:
        reservations = [_reservation(date(2025, 7, 5), date(2025, 7, 10))]
        nights = unavailable_nights(_property(), date(2025, 7, 10), date(2025, 7, 12), reservations)
        assert nights == []

    def test_cancelled_reservation_ignored(self) -> None:
        reservations = [_reservation(date(2025, 7, 10), date(2025, 7, 15), status="cancelled")]
        nights = unavailable_nights(_property(), date(2025, 7, 10), date(2025, 7, 12), reservations)
        assert nights == []

    def test_owner_blocked_dates(self) -> None:
        item = _property().model_copy(update={"unavailable_dates": [date(2025, 7, 11)]})
        assert unavailable_nights(item, date(2025, 7, 10), date(2025, 7, 13)) == [date(2025, 7, 11)]


class TestVisitSlots:
    def test_conflict_within_slot(self) -> None:
        booked = [_visit(14)]
        assert visit_conflicts(datetime(2025, 6, 2, 14, 30, tzinfo=BRT), booked) is True
        assert visit_conflicts(datetime(2025, 6, 2, 15, 0, tzinfo=BRT), booked) is False

    def test_cancelled_visit_frees_slot(self) -> None:
        booked = [_visit(14, status="cancelled")]
        assert visit_conflicts(datetime(2025, 6, 2, 14, 0, tzinfo=BRT), booked) is False

    def test_free_slots_skip_booked_and_past(self) -> None:
        now = datetime(2025, 6, 2, 9, 30, tzinfo=BRT)
        free = free_visit_slots(date(2025, 6, 2), [_visit(11)], now)
        assert [slot.hour for slot in free] == [10, 12, 13, 14, 15, 16, 17, 18]
