"""Classificação de temperatura do lead por palavras-chave.

Varre a última mensagem do cliente e as duas anteriores (peso 0,5),
sem acentos e sem caixa. O score parte de 50 e vai de 0 a 100:
quente a partir de 70, morno a partir de 40, frio abaixo disso.
Entrada vazia, só emoji ou inesperada resulta em morno sem sinais.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from app.domain.lead import LeadClassification, LeadSignal, LeadTemperature
from app.sessions.history import TurnRole
from utils.text import has_letters_or_digits, normalize_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.sessions.history import Turn

logger = logging.getLogger(__name__)

NEUTRAL_SCORE: Final[float] = 50.0
HOT_THRESHOLD: Final[float] = 70.0
WARM_THRESHOLD: Final[float] = 40.0
PREVIOUS_TURNS_WEIGHT: Final[float] = 0.5
PREVIOUS_TURNS: Final[int] = 2

_KEYWORDS: Final[dict[LeadSignal, tuple[str, ...]]] = {
    LeadSignal.BOOKING_INTENT: (
        "reservar",
        "reserva",
        "alugar",
        "fechar",
        "fechado",
        "contratar",
        "quero esse",
        "quero essa",
        "pode reservar",
    ),
    LeadSignal.URGENCY: (
        "urgente",
        "hoje",
        "agora",
        "imediato",
        "quanto antes",
        "preciso logo",
        "rapido",
        "asap",
        "o mais breve",
    ),
    LeadSignal.PRICE_INQUIRY: (
        "preco",
        "valor",
        "quanto fica",
        "quanto custa",
        "quanto sai",
        "custo",
        "orcamento",
        "diaria",
    ),
    LeadSignal.VISIT_INTENT: ("visita", "visitar", "conhecer o imovel", "ver pessoalmente"),
    LeadSignal.MEDIA_REQUEST: ("foto", "fotos", "video", "videos", "imagem", "imagens"),
    LeadSignal.POSITIVE_SENTIMENT: (
        "gostei",
        "adorei",
        "amei",
        "interessante",
        "perfeito",
        "ideal",
        "otimo",
        "maravilh",
        "lindo",
    ),
    LeadSignal.NEGATIVE_SENTIMENT: (
        "caro",
        "nao gostei",
        "nao posso",
        "impossivel",
        "pessimo",
        "desisto",
        "nao quero",
    ),
    LeadSignal.HESITATION: (
        "talvez",
        "vou pensar",
        "nao sei",
        "depois eu vejo",
        "mais pra frente",
        "so olhando",
        "so pesquisando",
    ),
}

_WEIGHTS: Final[dict[LeadSignal, float]] = {
    LeadSignal.BOOKING_INTENT: 20.0,
    LeadSignal.URGENCY: 15.0,
    LeadSignal.PRICE_INQUIRY: 10.0,
    LeadSignal.VISIT_INTENT: 15.0,
    LeadSignal.MEDIA_REQUEST: 5.0,
    LeadSignal.POSITIVE_SENTIMENT: 15.0,
    LeadSignal.NEGATIVE_SENTIMENT: -20.0,
    LeadSignal.HESITATION: -15.0,
}

_COMPILED: Final[dict[LeadSignal, re.Pattern[str]]] = {
    signal: re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")")
    for signal, keywords in _KEYWORDS.items()
}


def detect_signals(text: str) -> frozenset[LeadSignal]:
    """Sinais presentes em um texto (sem acentos, sem caixa)."""
    normalized = normalize_text(text)
    if not normalized:
        return frozenset()
    found = {signal for signal, pattern in _COMPILED.items() if pattern.search(normalized)}
    # "nao gostei" não conta como elogio
    if LeadSignal.NEGATIVE_SENTIMENT in found and "nao gostei" in normalized:
        found.discard(LeadSignal.POSITIVE_SENTIMENT)
    return frozenset(found)


def _temperature_for(score: float) -> LeadTemperature:
    if score >= HOT_THRESHOLD:
        return LeadTemperature.HOT
    if score >= WARM_THRESHOLD:
        return LeadTemperature.WARM
    return LeadTemperature.COLD


def classify(turns: Sequence[Turn]) -> LeadClassification:
    """Classifica o lead a partir dos turnos do cliente.

    Args:
        turns: Turnos da conversa, mais antigo primeiro

    Returns:
        LeadClassification (nunca levanta exceção).
    """
    try:
        customer = [turn.text for turn in turns if turn.role == TurnRole.USER]
        if not customer or not has_letters_or_digits(customer[-1]):
            return LeadClassification(score=NEUTRAL_SCORE)

        latest = detect_signals(customer[-1])
        previous = [detect_signals(text) for text in customer[-1 - PREVIOUS_TURNS : -1]]

        score = NEUTRAL_SCORE + sum(_WEIGHTS[signal] for signal in latest)
        for signals in previous:
            score += PREVIOUS_TURNS_WEIGHT * sum(_WEIGHTS[signal] for signal in signals)
        score = max(0.0, min(100.0, score))

        return LeadClassification(
            temperature=_temperature_for(score),
            signals=latest.union(*previous),
            score=score,
        )
    except Exception:
        logger.warning("lead_classification_failed", exc_info=True)
        return LeadClassification(score=NEUTRAL_SCORE)
