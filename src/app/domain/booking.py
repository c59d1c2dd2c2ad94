"""Modelos de domínio de clientes, reservas e visitas."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 - usado em runtime pelo Pydantic
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Client(BaseModel):
    """Cliente cadastrado a partir da conversa."""

    model_config = ConfigDict(extra="ignore")

    id: str
    tenant_id: str
    name: str
    document: str = Field(..., description="CPF (11) ou CNPJ (14), somente dígitos.")
    email: str
    phone: str
    created_at: datetime


class Reservation(BaseModel):
    """Reserva criada a partir de uma cotação."""

    model_config = ConfigDict(extra="ignore")

    id: str
    tenant_id: str
    property_id: str
    client_id: str
    check_in: date
    check_out: date
    guests: int = Field(..., ge=1)
    total_amount: int = Field(..., ge=0, description="Total em centavos.")
    status: Literal["pending", "confirmed", "cancelled"] = "pending"
    created_at: datetime


class Visit(BaseModel):
    """Visita presencial agendada a um imóvel."""

    model_config = ConfigDict(extra="ignore")

    id: str
    tenant_id: str
    property_id: str
    client_phone: str
    scheduled_for: datetime
    status: Literal["scheduled", "completed", "cancelled"] = "scheduled"


__all__ = ["Client", "Reservation", "Visit"]
