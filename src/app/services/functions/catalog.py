"""Handlers de catálogo: busca, detalhes e envio de mídia."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.function_call import FunctionCallResult, executed
from app.domain.pricing import format_brl
from utils.errors import PreconditionError, ValidationError

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallRequest
    from app.domain.property import Property
    from app.services.function_registry import HandlerEnv
    from app.services.functions.schemas import (
        PropertyDetailsArgs,
        SearchPropertiesArgs,
        SendPropertyMediaArgs,
    )

MAX_LISTED_RESULTS = 5


def property_summary(item: Property) -> dict[str, object]:
    """Resumo serializável usado no payload e no contexto."""
    return {
        "property_id": item.id,
        "title": item.title,
        "city": item.city,
        "nightly_rate": item.pricing.base_nightly,
        "max_guests": item.max_guests,
    }


async def load_property(env: HandlerEnv, tenant_id: str, property_id: str) -> Property:
    """Busca imóvel do tenant ou levanta ValidationError."""
    item = await env.services.catalog.get(tenant_id, property_id)
    if item is None or not item.active:
        raise ValidationError(
            "Não encontrei esse imóvel. Quer que eu busque opções em alguma cidade?",
            errors=[{"field": "propertyId", "message": "imóvel não encontrado"}],
        )
    return item


async def search_properties(
    args: SearchPropertiesArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    results = await env.services.catalog.search(
        request.tenant_id,
        args.city,
        guests=args.guests,
        amenities=args.amenities,
    )
    listed = results[:MAX_LISTED_RESULTS]
    guests_text = f" para {args.guests} pessoas" if args.guests else ""

    if not listed:
        summary = (
            f"Não encontrei imóveis disponíveis em {args.city}{guests_text} "
            "(0 resultados). Quer tentar outra cidade ou ajustar os critérios?"
        )
    else:
        label = "opção" if len(results) == 1 else "opções"
        lines = [f"Encontrei {len(results)} {label} em {args.city}{guests_text}:"]
        for index, item in enumerate(listed, start=1):
            where = f" ({item.neighborhood})" if item.neighborhood else ""
            lines.append(
                f"{index}. {item.title}{where}: {format_brl(item.pricing.base_nightly)}"
                f"/noite, até {item.max_guests} hóspedes"
            )
        lines.append("Quer ver detalhes, fotos ou calcular o valor de alguma?")
        summary = "\n".join(lines)

    return executed(
        "search_properties",
        summary,
        count=len(results),
        city=args.city,
        guests=args.guests,
        amenities=list(args.amenities),
        properties=[property_summary(item) for item in listed],
    )


async def get_property_details(
    args: PropertyDetailsArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    item = await load_property(env, request.tenant_id, args.property_id)
    pricing = item.pricing
    lines = [
        f"🏠 {item.title}",
        f"📍 {item.neighborhood + ', ' if item.neighborhood else ''}{item.city}",
        f"🛏️ {item.bedrooms} quarto(s), {item.bathrooms} banheiro(s), "
        f"até {item.max_guests} hóspedes",
        f"💰 {format_brl(pricing.base_nightly)}/noite "
        f"(mínimo de {pricing.minimum_nights} noite(s))",
    ]
    if pricing.cleaning_fee:
        lines.append(f"🧹 Taxa de limpeza: {format_brl(pricing.cleaning_fee)}")
    if item.amenities:
        lines.append(f"✨ Comodidades: {', '.join(item.amenities)}")
    if item.description:
        lines.append(item.description)

    return executed(
        "get_property_details",
        "\n".join(lines),
        property=property_summary(item),
        amenities=list(item.amenities),
        minimum_nights=pricing.minimum_nights,
        has_photos=bool(item.photos),
    )


async def send_property_media(
    args: SendPropertyMediaArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    item = await load_property(env, request.tenant_id, args.property_id)
    urls: list[str] = []
    if args.media_type in ("photos", "both"):
        urls.extend(item.photos)
    if args.media_type in ("videos", "both"):
        urls.extend(item.videos)

    if not urls:
        kind = "vídeos" if args.media_type == "videos" else "fotos"
        raise PreconditionError(f"Este imóvel ainda não tem {kind} cadastrados.")

    sent = await env.services.media.send_media(
        request.tenant_id,
        request.customer_phone,
        urls,
        caption=item.title,
    )
    return executed(
        "send_property_media",
        f"📸 Enviei {sent} arquivo(s) de mídia do imóvel {item.title}.",
        property_id=item.id,
        media_type=args.media_type,
        sent=sent,
    )
