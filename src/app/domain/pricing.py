"""Cotação de preço (PriceQuote) e formatação monetária.

Todos os valores são inteiros em centavos; arredondamento só na
formatação para exibição.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Cotação calculada para um imóvel e período.

    Attributes:
        property_id: Imóvel cotado
        check_in: Data de entrada
        check_out: Data de saída (estritamente depois de check_in)
        nights: Noites entre check_in e check_out
        guest_count: Hóspedes considerados
        base_amount: Diária base em centavos
        cleaning_fee: Taxa de limpeza em centavos
        extra_guest_fee: Total de taxa de hóspedes extras na estadia
        total_amount: Total em centavos
    """

    property_id: str
    check_in: date
    check_out: date
    nights: int
    guest_count: int
    base_amount: int
    cleaning_fee: int
    extra_guest_fee: int
    total_amount: int

    @property
    def lodging_amount(self) -> int:
        """Diárias sem taxas (base × noites)."""
        return self.base_amount * self.nights

    def matches(self, property_id: str, check_in: date, check_out: date) -> bool:
        """True se a cotação é do mesmo imóvel e período."""
        return (
            self.property_id == property_id
            and self.check_in == check_in
            and self.check_out == check_out
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_id": self.property_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "nights": self.nights,
            "guest_count": self.guest_count,
            "base_amount": self.base_amount,
            "cleaning_fee": self.cleaning_fee,
            "extra_guest_fee": self.extra_guest_fee,
            "total_amount": self.total_amount,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PriceQuote:
        return cls(
            property_id=data["property_id"],
            check_in=date.fromisoformat(data["check_in"]),
            check_out=date.fromisoformat(data["check_out"]),
            nights=int(data["nights"]),
            guest_count=int(data["guest_count"]),
            base_amount=int(data["base_amount"]),
            cleaning_fee=int(data["cleaning_fee"]),
            extra_guest_fee=int(data["extra_guest_fee"]),
            total_amount=int(data["total_amount"]),
        )


def format_brl(cents: int) -> str:
    """Formata centavos como moeda brasileira (ex: 123456 -> "R$ 1.234,56")."""
    sign = "-" if cents < 0 else ""
    reais, centavos = divmod(abs(cents), 100)
    reais_str = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {reais_str},{centavos:02d}"


def format_date_br(value: date) -> str:
    """Formata data no padrão brasileiro (dd/mm/aaaa)."""
    return value.strftime("%d/%m/%Y")


__all__ = ["PriceQuote", "format_brl", "format_date_br"]
