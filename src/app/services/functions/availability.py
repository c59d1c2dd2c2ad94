"""Disponibilidade de estadias e de horários de visita."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.function_call import FunctionCallResult, executed
from app.domain.pricing import format_date_br
from app.services.functions.catalog import load_property
from app.services.validation_engine import free_visit_slots, unavailable_nights
from utils.errors import ValidationError

if TYPE_CHECKING:
    from datetime import date

    from app.domain.function_call import FunctionCallRequest
    from app.domain.property import Property
    from app.services.function_registry import HandlerEnv
    from app.services.functions.schemas import CheckVisitAvailabilityArgs

logger = logging.getLogger(__name__)


async def ensure_stay_available(
    env: HandlerEnv,
    tenant_id: str,
    item: Property,
    check_in: date,
    check_out: date,
) -> None:
    """Garante que nenhuma noite do período está bloqueada ou reservada.

    Raises:
        ValidationError: com as noites indisponíveis na mensagem e em ``errors``.
    """
    reservations = await env.services.reservations.overlapping(
        tenant_id, item.id, check_in, check_out
    )
    nights = unavailable_nights(item, check_in, check_out, reservations)
    if not nights:
        return
    logger.info(
        "stay_unavailable",
        extra={"tenant_id": tenant_id, "property_id": item.id, "nights": len(nights)},
    )
    listed = ", ".join(format_date_br(night) for night in nights)
    raise ValidationError(
        f"O imóvel {item.title} não está disponível nas noites de {listed}. "
        "Quer tentar outras datas?",
        errors=[
            {
                "field": "checkIn",
                "message": "datas indisponíveis: "
                + ", ".join(night.isoformat() for night in nights),
            }
        ],
    )


async def check_visit_availability(
    args: CheckVisitAvailabilityArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    title = ""
    if args.property_id:
        title = (await load_property(env, request.tenant_id, args.property_id)).title
    if args.visit_date < env.today:
        raise ValidationError(
            "Essa data já passou. Qual outro dia fica bom para você?",
            errors=[{"field": "date", "message": "não pode estar no passado"}],
        )

    visits = await env.services.visits.scheduled_on(request.tenant_id, args.visit_date)
    free = [slot.strftime("%H:%M") for slot in free_visit_slots(args.visit_date, visits, env.now)]
    day = format_date_br(args.visit_date)
    where = f" ao imóvel {title}" if title else ""
    if free:
        summary = (
            f"🕐 Horários livres para visita{where} em {day}: {', '.join(free)}. "
            "Qual prefere?"
        )
    else:
        summary = f"Não tenho horários livres para visita em {day}. Quer tentar outro dia?"
    return executed(
        "check_visit_availability",
        summary,
        date=args.visit_date.isoformat(),
        property_id=args.property_id,
        available_times=free,
        occupied_times=sorted(v.scheduled_for.strftime("%H:%M") for v in visits),
    )
