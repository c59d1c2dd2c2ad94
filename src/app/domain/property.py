"""Modelos de domínio de imóveis e regras de preço.

Valores monetários em centavos (inteiros). A conversão para reais só
acontece na formatação.
"""

from __future__ import annotations

from datetime import date  # noqa: TC003 - usado em runtime pelo Pydantic

from pydantic import BaseModel, ConfigDict, Field


class PropertyPricing(BaseModel):
    """Regras de preço de um imóvel."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    base_nightly: int = Field(..., ge=0, description="Diária base em centavos.")
    cleaning_fee: int = Field(default=0, ge=0, description="Taxa de limpeza em centavos.")
    extra_guest_fee: int = Field(
        default=0,
        ge=0,
        description="Taxa por hóspede extra por noite, em centavos.",
    )
    included_guests: int = Field(
        default=2,
        ge=1,
        description="Hóspedes incluídos na diária base.",
    )
    minimum_nights: int = Field(default=1, ge=1, description="Estadia mínima em noites.")


class Property(BaseModel):
    """Imóvel disponível para locação por temporada."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Identificador do imóvel.")
    tenant_id: str = Field(..., description="Tenant dono do imóvel.")
    title: str = Field(..., description="Título de exibição.")
    city: str = Field(..., description="Cidade.")
    neighborhood: str = Field(default="", description="Bairro.")
    description: str = Field(default="", description="Descrição livre.")
    bedrooms: int = Field(default=1, ge=0)
    bathrooms: int = Field(default=1, ge=0)
    max_guests: int = Field(..., ge=1, description="Capacidade máxima de hóspedes.")
    amenities: list[str] = Field(default_factory=list, description="Comodidades.")
    photos: list[str] = Field(default_factory=list, description="URLs de fotos.")
    videos: list[str] = Field(default_factory=list, description="URLs de vídeos.")
    pricing: PropertyPricing
    active: bool = Field(default=True, description="Imóvel disponível para oferta.")
    unavailable_dates: list[date] = Field(
        default_factory=list,
        description="Noites bloqueadas pelo proprietário (manutenção, uso próprio).",
    )


__all__ = ["Property", "PropertyPricing"]
