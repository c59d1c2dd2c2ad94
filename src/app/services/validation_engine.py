"""Validação de datas e cálculo de preço (funções puras).

Regras:
- Saída menor ou igual à entrada: erro definitivo, sem correção.
- Entrada no passado: não é erro definitivo; devolve sugestão com o mesmo
  dia/mês no próximo ano em que a data ainda não passou, mantendo a
  duração da estadia.
- Total = diária × noites + limpeza + max(0, hóspedes - incluídos)
  × taxa extra × noites, tudo em centavos.
- Noite indisponível: bloqueada pelo proprietário ou ocupada por reserva
  ativa. Visitas ocupam uma janela de VISIT_SLOT_MINUTES por tenant.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from app.domain.booking import Reservation, Visit
from app.domain.pricing import PriceQuote, format_brl, format_date_br
from app.domain.property import Property
from utils.errors import ValidationError

VISIT_OPENING_HOUR = 8
VISIT_CLOSING_HOUR = 18
VISIT_SLOT_MINUTES = 60

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2})(?::|h)?(\d{2})?\s*$", re.IGNORECASE)

__all__ = [
    "DateValidation",
    "calculate_quote",
    "describe_quote",
    "format_brl",
    "free_visit_slots",
    "nights_between",
    "parse_visit_time",
    "shift_to_next_occurrence",
    "unavailable_nights",
    "validate_stay_dates",
    "validate_visit_datetime",
    "visit_conflicts",
]


@dataclass(frozen=True, slots=True)
class DateValidation:
    """Resultado da validação de período.

    ``ok=False`` só acontece com entrada no passado e sempre traz sugestão.
    """

    ok: bool
    check_in: date
    check_out: date
    suggested_check_in: date | None = None
    suggested_check_out: date | None = None

    @property
    def suggestion_text(self) -> str:
        if self.suggested_check_in is None or self.suggested_check_out is None:
            return ""
        return (
            f"{format_date_br(self.suggested_check_in)} a "
            f"{format_date_br(self.suggested_check_out)}"
        )


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def _add_years(value: date, years: int) -> date:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # 29/02 em ano não bissexto
        return value.replace(year=value.year + years, day=28)


def shift_to_next_occurrence(
    check_in: date,
    check_out: date,
    today: date,
) -> tuple[date, date]:
    """Desloca o período em anos inteiros até a entrada não estar no passado."""
    stay = check_out - check_in
    years = 0
    shifted = check_in
    while shifted < today:
        years += 1
        shifted = _add_years(check_in, years)
    return shifted, shifted + stay


def validate_stay_dates(check_in: date, check_out: date, today: date) -> DateValidation:
    """Valida período de hospedagem.

    Raises:
        ValidationError: check_out <= check_in.
    """
    if check_out <= check_in:
        raise ValidationError(
            "A data de saída precisa ser depois da data de entrada "
            f"({format_date_br(check_in)} → {format_date_br(check_out)}).",
            errors=[{"field": "checkOut", "message": "deve ser posterior a checkIn"}],
        )

    if check_in < today:
        suggested_in, suggested_out = shift_to_next_occurrence(check_in, check_out, today)
        return DateValidation(
            ok=False,
            check_in=check_in,
            check_out=check_out,
            suggested_check_in=suggested_in,
            suggested_check_out=suggested_out,
        )

    return DateValidation(ok=True, check_in=check_in, check_out=check_out)


def calculate_quote(
    item: Property,
    check_in: date,
    check_out: date,
    guests: int,
) -> PriceQuote:
    """Calcula a cotação de um período já validado.

    Raises:
        ValidationError: período inválido, hóspedes fora da capacidade ou
            estadia abaixo do mínimo.
    """
    nights = nights_between(check_in, check_out)
    if nights <= 0:
        raise ValidationError(
            "A data de saída precisa ser depois da data de entrada.",
            errors=[{"field": "checkOut", "message": "deve ser posterior a checkIn"}],
        )

    if guests < 1:
        raise ValidationError(
            "Preciso saber quantas pessoas vão se hospedar.",
            errors=[{"field": "guests", "message": "deve ser >= 1"}],
        )

    if guests > item.max_guests:
        raise ValidationError(
            f"Número máximo de hóspedes para este imóvel é {item.max_guests}.",
            errors=[{"field": "guests", "message": f"máximo {item.max_guests}"}],
        )

    pricing = item.pricing
    if nights < pricing.minimum_nights:
        plural = "noite" if pricing.minimum_nights == 1 else "noites"
        raise ValidationError(
            f"Estadia mínima de {pricing.minimum_nights} {plural} para este imóvel.",
            errors=[
                {"field": "checkOut", "message": f"mínimo {pricing.minimum_nights} noites"}
            ],
        )

    extra_guests = max(0, guests - pricing.included_guests)
    extra_guest_fee = extra_guests * pricing.extra_guest_fee * nights
    total = pricing.base_nightly * nights + pricing.cleaning_fee + extra_guest_fee

    return PriceQuote(
        property_id=item.id,
        check_in=check_in,
        check_out=check_out,
        nights=nights,
        guest_count=guests,
        base_amount=pricing.base_nightly,
        cleaning_fee=pricing.cleaning_fee,
        extra_guest_fee=extra_guest_fee,
        total_amount=max(0, total),
    )


def describe_quote(quote: PriceQuote, title: str) -> str:
    """Resumo legível da cotação para a resposta."""
    lines = [
        f"💰 {title}: {format_date_br(quote.check_in)} a "
        f"{format_date_br(quote.check_out)} ({quote.nights} noites, "
        f"{quote.guest_count} hóspedes)",
        f"• Diárias: {quote.nights} × {format_brl(quote.base_amount)} = "
        f"{format_brl(quote.lodging_amount)}",
    ]
    if quote.extra_guest_fee:
        lines.append(f"• Hóspedes extras: {format_brl(quote.extra_guest_fee)}")
    if quote.cleaning_fee:
        lines.append(f"• Taxa de limpeza: {format_brl(quote.cleaning_fee)}")
    lines.append(f"• Total: {format_brl(quote.total_amount)}")
    return "\n".join(lines)


def parse_visit_time(raw: str) -> time:
    """Converte "14:30", "14h30" ou "9h" em time.

    Raises:
        ValidationError: formato inválido ou fora do horário de visitas.
    """
    match = _TIME_PATTERN.match(raw or "")
    if not match:
        raise ValidationError(
            "Não entendi o horário. Pode me dizer no formato 14:30?",
            errors=[{"field": "time", "message": "formato HH:MM"}],
        )
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    if hour > 23 or minute > 59:
        raise ValidationError(
            "Esse horário não existe. Pode confirmar?",
            errors=[{"field": "time", "message": "horário inválido"}],
        )
    closing = (VISIT_CLOSING_HOUR, 0)
    if hour < VISIT_OPENING_HOUR or (hour, minute) > closing:
        raise ValidationError(
            f"As visitas acontecem entre {VISIT_OPENING_HOUR}h e {VISIT_CLOSING_HOUR}h.",
            errors=[{"field": "time", "message": "fora do horário comercial"}],
        )
    return time(hour=hour, minute=minute)


def validate_visit_datetime(visit_date: date, raw_time: str, now: datetime) -> datetime:
    """Combina data e horário da visita garantindo que não está no passado.

    ``now`` deve ser naive ou ter o mesmo fuso usado no retorno.

    Raises:
        ValidationError: data/horário no passado ou inválidos.
    """
    visit_time = parse_visit_time(raw_time)
    scheduled = datetime.combine(visit_date, visit_time, tzinfo=now.tzinfo)
    if scheduled <= now:
        raise ValidationError(
            "Essa data de visita já passou. Qual outro dia fica bom para você?",
            errors=[{"field": "date", "message": "não pode estar no passado"}],
        )
    return scheduled


def unavailable_nights(
    item: Property,
    check_in: date,
    check_out: date,
    reservations: Sequence[Reservation] = (),
) -> list[date]:
    """Noites do período que não podem ser vendidas, em ordem."""
    blocked = set(item.unavailable_dates)
    nights = [
        check_in + timedelta(days=offset)
        for offset in range(nights_between(check_in, check_out))
    ]
    return [
        night
        for night in nights
        if night in blocked
        or any(r.check_in <= night < r.check_out for r in reservations if r.status != "cancelled")
    ]


def visit_conflicts(scheduled_for: datetime, visits: Sequence[Visit]) -> bool:
    """Há visita marcada a menos de VISIT_SLOT_MINUTES desse horário."""
    slot = timedelta(minutes=VISIT_SLOT_MINUTES)
    return any(
        abs(visit.scheduled_for - scheduled_for) < slot
        for visit in visits
        if visit.status == "scheduled"
    )


def free_visit_slots(day: date, visits: Sequence[Visit], now: datetime) -> list[datetime]:
    """Horários cheios (8h às 18h) ainda livres no dia, depois de ``now``."""
    slots = [
        datetime.combine(day, time(hour=hour), tzinfo=now.tzinfo)
        for hour in range(VISIT_OPENING_HOUR, VISIT_CLOSING_HOUR + 1)
    ]
    return [slot for slot in slots if slot > now and not visit_conflicts(slot, visits)]
