"""Handlers de cadastro de cliente, reserva e visita."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.function_call import FunctionCallResult, executed
from app.domain.pricing import format_brl, format_date_br
from app.services.functions.availability import ensure_stay_available
from app.services.functions.catalog import load_property
from app.services.validation_engine import (
    calculate_quote,
    free_visit_slots,
    validate_stay_dates,
    validate_visit_datetime,
    visit_conflicts,
)
from utils.errors import PreconditionError, ValidationError

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallRequest
    from app.services.function_registry import HandlerEnv
    from app.services.functions.schemas import (
        CreateReservationArgs,
        RegisterClientArgs,
        ScheduleVisitArgs,
    )


async def register_client(
    args: RegisterClientArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    client = await env.services.clients.upsert(
        request.tenant_id,
        name=args.name,
        document=args.document,
        email=args.email,
        phone=request.customer_phone,
    )
    first_name = client.name.split()[0]
    return executed(
        "register_client",
        f"✅ Cadastro feito, {first_name}! Já posso seguir com a reserva.",
        client_id=client.id,
        name=client.name,
        document=client.document,
        email=client.email,
    )


async def create_reservation(
    args: CreateReservationArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    dates = validate_stay_dates(args.check_in, args.check_out, env.today)
    if not dates.ok:
        raise ValidationError(
            f"Não consigo reservar com entrada em {format_date_br(args.check_in)}, "
            f"essa data já passou. Você quis dizer {dates.suggestion_text}?",
            errors=[{"field": "checkIn", "message": "data no passado"}],
        )

    client = await env.services.clients.get(request.tenant_id, args.client_id)
    if client is None:
        raise PreconditionError(
            "Antes de reservar preciso do seu cadastro: nome completo, CPF e e-mail.",
        )

    item = await load_property(env, request.tenant_id, args.property_id)
    guests = args.guests or 1
    quote = calculate_quote(item, args.check_in, args.check_out, guests)
    await ensure_stay_available(env, request.tenant_id, item, quote.check_in, quote.check_out)
    reservation = await env.services.reservations.create(
        request.tenant_id,
        property_id=item.id,
        client_id=client.id,
        check_in=quote.check_in,
        check_out=quote.check_out,
        guests=quote.guest_count,
        total_amount=quote.total_amount,
    )
    return executed(
        "create_reservation",
        (
            f"🎉 Reserva criada! Código {reservation.id}: {item.title}, "
            f"{format_date_br(quote.check_in)} a {format_date_br(quote.check_out)}, "
            f"total de {format_brl(quote.total_amount)}. "
            "Vou te enviar as instruções de pagamento."
        ),
        reservation_id=reservation.id,
        property_id=item.id,
        check_in=quote.check_in.isoformat(),
        check_out=quote.check_out.isoformat(),
        total_amount=quote.total_amount,
    )


async def schedule_visit(
    args: ScheduleVisitArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    item = await load_property(env, request.tenant_id, args.property_id)
    scheduled_for = validate_visit_datetime(args.visit_date, args.visit_time, env.now)
    booked = await env.services.visits.scheduled_on(request.tenant_id, scheduled_for.date())
    if visit_conflicts(scheduled_for, booked):
        slots = free_visit_slots(scheduled_for.date(), booked, env.now)
        free = [slot.strftime("%H:%M") for slot in slots]
        options = (
            f"Tenho livre: {', '.join(free[:3])}. Algum desses serve?"
            if free
            else "Esse dia está lotado. Quer tentar outro?"
        )
        raise ValidationError(
            f"Já tenho uma visita marcada perto das {scheduled_for:%H:%M} em "
            f"{format_date_br(scheduled_for.date())}. {options}",
            errors=[{"field": "time", "message": "horário ocupado"}],
        )
    visit = await env.services.visits.schedule(
        request.tenant_id,
        property_id=item.id,
        client_phone=request.customer_phone,
        scheduled_for=scheduled_for,
    )
    return executed(
        "schedule_visit",
        (
            f"📅 Visita agendada ao imóvel {item.title} em "
            f"{format_date_br(scheduled_for.date())} às {scheduled_for:%H:%M}."
        ),
        visit_id=visit.id,
        property_id=item.id,
        scheduled_for=scheduled_for.isoformat(),
    )
