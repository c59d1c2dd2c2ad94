"""Classificação de lead (temperatura) calculada a cada turno."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class LeadTemperature(StrEnum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class LeadSignal(StrEnum):
    """Categorias de sinais detectados na mensagem."""

    BOOKING_INTENT = "booking_intent"
    URGENCY = "urgency"
    PRICE_INQUIRY = "price_inquiry"
    VISIT_INTENT = "visit_intent"
    MEDIA_REQUEST = "media_request"
    POSITIVE_SENTIMENT = "positive_sentiment"
    NEGATIVE_SENTIMENT = "negative_sentiment"
    HESITATION = "hesitation"


@dataclass(frozen=True, slots=True)
class LeadClassification:
    temperature: LeadTemperature = LeadTemperature.WARM
    signals: frozenset[LeadSignal] = field(default_factory=frozenset)
    score: float = 0.0

    @property
    def needs_follow_up(self) -> bool:
        """Lead quente é sinalizado para acompanhamento humano."""
        return self.temperature == LeadTemperature.HOT


__all__ = ["LeadClassification", "LeadSignal", "LeadTemperature"]
