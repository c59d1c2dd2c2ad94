"""Normalização de texto para heurísticas e comparações."""

from __future__ import annotations

import re
import unicodedata

_NON_DIGITS = re.compile(r"\D+")


def normalize_text(text: str | None) -> str:
    """Minúsculas, sem acentos e com espaços colapsados."""
    lowered = (text or "").strip().lower()
    if not lowered:
        return ""
    no_accents = "".join(
        ch for ch in unicodedata.normalize("NFKD", lowered) if not unicodedata.combining(ch)
    )
    return " ".join(no_accents.split())


def digits_only(text: str | None) -> str:
    return _NON_DIGITS.sub("", text or "")


def has_letters_or_digits(text: str | None) -> bool:
    """False para texto vazio, só pontuação ou só emoji."""
    return any(ch.isalnum() for ch in (text or ""))
