"""Mascaramento de PII antes de logs e do envio ao modelo.

Mascara CPF, CNPJ, e-mails e telefones BR. Determinístico: mesma
entrada gera a mesma saída.
"""

from __future__ import annotations

import re
from re import Pattern
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.sessions.history import Turn

# Ordem importa: CNPJ antes de CPF, e-mail antes de telefone
_PATTERNS: Final[dict[str, Pattern[str]]] = {
    "cnpj": re.compile(r"\b\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}\b"),
    "cpf": re.compile(r"\b\d{3}\.?\d{3}\.?\d{3}-?\d{2}\b"),
    "email": re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    "phone": re.compile(
        r"\+?55\s*\(?\d{2}\)?\s*9?\d{4}-?\d{4}\b|"
        r"\(?\b\d{2}\)?\s*9?\d{4}-?\d{4}\b|"
        r"\b9\d{4}-?\d{4}\b"
    ),
}

_MASKS: Final[dict[str, str]] = {
    "cnpj": "[CNPJ]",
    "cpf": "[CPF]",
    "email": "[EMAIL]",
    "phone": "[PHONE]",
}


def sanitize_pii(text: str) -> str:
    """Mascara PII em texto livre.

    Exemplos:
        >>> sanitize_pii("Meu CPF é 123.456.789-10")
        'Meu CPF é [CPF]'
        >>> sanitize_pii("manda em ana@example.com")
        'manda em [EMAIL]'
    """
    if not text:
        return text
    result = text
    for pii_type, pattern in _PATTERNS.items():
        result = pattern.sub(_MASKS[pii_type], result)
    return result


def contains_pii(text: str) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in _PATTERNS.values())


def mask_phone(phone: str) -> str:
    """Mantém só os 4 últimos dígitos (ex: ``***4321``)."""
    digits = "".join(ch for ch in phone if ch.isdigit())
    if len(digits) <= 4:
        return "***"
    return f"***{digits[-4:]}"


def mask_history(turns: Sequence[Turn], max_turns: int = 8) -> list[str]:
    """Renderiza os últimos turnos como texto, com PII mascarada.

    Args:
        turns: Turnos do contexto (mais antigo primeiro)
        max_turns: Quantos turnos manter

    Returns:
        Linhas "Cliente: ..." / "Assistente: ..." sanitizadas.
    """
    if not turns:
        return []
    return [sanitize_pii(str(turn)) for turn in turns[-max_turns:]]
