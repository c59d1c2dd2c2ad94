"""Catálogo de funções do agente e montagem do registry."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from app.domain.business_time import DEFAULT_UTC_OFFSET_HOURS
from app.protocols.domain_services import DomainServices
from app.services.function_registry import FunctionRegistry
from app.services.functions.availability import check_visit_availability
from app.services.functions.booking import (
    create_reservation,
    register_client,
    schedule_visit,
)
from app.services.functions.catalog import (
    get_property_details,
    search_properties,
    send_property_media,
)
from app.services.functions.payments import cancel_payment
from app.services.functions.pricing import calculate_price
from app.services.functions.schemas import (
    CalculatePriceArgs,
    CancelPaymentArgs,
    CheckVisitAvailabilityArgs,
    CreateReservationArgs,
    PropertyDetailsArgs,
    RegisterClientArgs,
    ScheduleVisitArgs,
    SearchPropertiesArgs,
    SendPropertyMediaArgs,
)

__all__ = ["SIDE_EFFECTING_FUNCTIONS", "build_function_registry"]

SIDE_EFFECTING_FUNCTIONS = frozenset({
    "register_client",
    "create_reservation",
    "schedule_visit",
    "cancel_payment",
    "send_property_media",
})


def build_function_registry(
    services: DomainServices,
    *,
    clock: Callable[[], datetime] | None = None,
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
) -> FunctionRegistry:
    """Cria o registry com o catálogo completo, já congelado."""
    registry = FunctionRegistry(services, clock=clock, utc_offset_hours=utc_offset_hours)
    catalog = (
        (
            "search_properties",
            SearchPropertiesArgs,
            search_properties,
            "Busca imóveis disponíveis por cidade, hóspedes e comodidades.",
        ),
        (
            "get_property_details",
            PropertyDetailsArgs,
            get_property_details,
            "Mostra detalhes de um imóvel (quartos, comodidades, preço).",
        ),
        (
            "calculate_price",
            CalculatePriceArgs,
            calculate_price,
            "Calcula o preço total de uma estadia em um imóvel.",
        ),
        (
            "send_property_media",
            SendPropertyMediaArgs,
            send_property_media,
            "Envia fotos e/ou vídeos de um imóvel ao cliente.",
        ),
        (
            "register_client",
            RegisterClientArgs,
            register_client,
            "Cadastra o cliente com nome completo, CPF/CNPJ e e-mail.",
        ),
        (
            "create_reservation",
            CreateReservationArgs,
            create_reservation,
            "Cria a reserva de um imóvel para um cliente cadastrado.",
        ),
        (
            "check_visit_availability",
            CheckVisitAvailabilityArgs,
            check_visit_availability,
            "Lista os horários livres para visita em um dia (8h às 18h).",
        ),
        (
            "schedule_visit",
            ScheduleVisitArgs,
            schedule_visit,
            "Agenda visita presencial a um imóvel em data e horário.",
        ),
        (
            "cancel_payment",
            CancelPaymentArgs,
            cancel_payment,
            "Cancela um pagamento pendente informando motivo e solicitante.",
        ),
    )
    for name, schema, handler, description in catalog:
        registry.register(
            name,
            schema,
            name in SIDE_EFFECTING_FUNCTIONS,
            handler,
            description=description,
        )
    registry.freeze()
    return registry
