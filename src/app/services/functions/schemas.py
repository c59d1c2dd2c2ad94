"""Schemas de argumentos das funções (nomes camelCase no formato do modelo)."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.text import digits_only

_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def _parse_date(value: Any) -> Any:
    """Aceita também dd/mm/aaaa além de ISO."""
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return datetime.strptime(stripped, "%d/%m/%Y").date()
        except ValueError:
            return stripped
    return value


class FunctionArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class SearchPropertiesArgs(FunctionArgs):
    city: str = Field(..., min_length=2, description="Cidade desejada.")
    guests: int | None = Field(default=None, ge=1, le=50, description="Número de hóspedes.")
    amenities: list[str] = Field(
        default_factory=list,
        description="Comodidades desejadas (ex: piscina, wifi).",
    )


class PropertyRefArgs(FunctionArgs):
    property_id: str = Field(..., alias="propertyId", min_length=1, description="ID do imóvel.")


class StayArgs(PropertyRefArgs):
    check_in: date = Field(..., alias="checkIn", description="Entrada (YYYY-MM-DD).")
    check_out: date = Field(..., alias="checkOut", description="Saída (YYYY-MM-DD).")

    parse_dates = field_validator("check_in", "check_out", mode="before")(_parse_date)


class CalculatePriceArgs(StayArgs):
    guests: int = Field(..., ge=1, description="Número de hóspedes.")


class PropertyDetailsArgs(PropertyRefArgs):
    pass


class SendPropertyMediaArgs(PropertyRefArgs):
    media_type: Literal["photos", "videos", "both"] = Field(
        default="photos",
        alias="mediaType",
        description="Tipo de mídia a enviar.",
    )


class RegisterClientArgs(FunctionArgs):
    name: str = Field(..., min_length=3, description="Nome completo do cliente.")
    document: str = Field(..., description="CPF ou CNPJ.")
    email: str = Field(..., description="E-mail do cliente.")

    @field_validator("name")
    @classmethod
    def _full_name(cls, value: str) -> str:
        if len(value.split()) < 2:
            raise ValueError("informe nome e sobrenome")
        return value

    @field_validator("document")
    @classmethod
    def _document_digits(cls, value: str) -> str:
        digits = digits_only(value)
        if len(digits) not in (11, 14):
            raise ValueError("CPF deve ter 11 dígitos ou CNPJ 14 dígitos")
        return digits

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str) -> str:
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("e-mail inválido")
        return value.lower()


class CreateReservationArgs(StayArgs):
    client_id: str = Field(..., alias="clientId", min_length=1, description="ID do cliente.")
    guests: int | None = Field(default=None, ge=1, description="Número de hóspedes.")


class ScheduleVisitArgs(PropertyRefArgs):
    visit_date: date = Field(..., alias="date", description="Dia da visita (YYYY-MM-DD).")
    visit_time: str = Field(..., alias="time", description="Horário da visita (HH:MM).")

    parse_visit_date = field_validator("visit_date", mode="before")(_parse_date)


class CheckVisitAvailabilityArgs(FunctionArgs):
    visit_date: date = Field(..., alias="date", description="Dia desejado (YYYY-MM-DD).")
    property_id: str | None = Field(
        default=None,
        alias="propertyId",
        description="Imóvel a visitar (opcional).",
    )

    parse_visit_date = field_validator("visit_date", mode="before")(_parse_date)


class CancelPaymentArgs(FunctionArgs):
    transaction_id: str = Field(..., alias="transactionId", min_length=1)
    reason: str = Field(..., min_length=3, description="Motivo do cancelamento.")
    cancelled_by: Literal["client", "agent"] = Field(
        ...,
        alias="cancelledBy",
        description="Quem solicitou o cancelamento.",
    )
