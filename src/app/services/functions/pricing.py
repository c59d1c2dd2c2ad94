"""Handler de cotação de preço."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.function_call import FunctionCallResult, FunctionCallStatus, executed
from app.domain.pricing import format_date_br
from app.services.functions.availability import ensure_stay_available
from app.services.functions.catalog import load_property
from app.services.validation_engine import (
    calculate_quote,
    describe_quote,
    validate_stay_dates,
)

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallRequest
    from app.services.function_registry import HandlerEnv
    from app.services.functions.schemas import CalculatePriceArgs


async def calculate_price(
    args: CalculatePriceArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    dates = validate_stay_dates(args.check_in, args.check_out, env.today)
    if not dates.ok:
        # Entrada no passado: sugestão em vez de erro definitivo
        return FunctionCallResult(
            function_name="calculate_price",
            status=FunctionCallStatus.REJECTED_VALIDATION,
            payload={
                "reason": "past_check_in",
                "suggested_check_in": dates.suggested_check_in.isoformat(),
                "suggested_check_out": dates.suggested_check_out.isoformat(),
            },
            human_summary=(
                f"A data de entrada {format_date_br(args.check_in)} já passou. "
                f"Você quis dizer {dates.suggestion_text}? "
                "Se sim, me confirme que eu calculo para esse período."
            ),
            errors=({"field": "checkIn", "message": "data no passado"},),
        )

    item = await load_property(env, request.tenant_id, args.property_id)
    quote = calculate_quote(item, args.check_in, args.check_out, args.guests)
    await ensure_stay_available(env, request.tenant_id, item, quote.check_in, quote.check_out)
    return executed(
        "calculate_price",
        describe_quote(quote, item.title) + "\nQuer que eu faça a reserva?",
        quote=quote.to_dict(),
        property_title=item.title,
    )
