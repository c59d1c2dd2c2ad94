"""Leitura tolerante de JSON vindo do modelo.

Argumentos de tool calls às vezes chegam com cercas markdown ou texto
em volta; aqui sobra só o objeto.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(raw: str | None) -> dict[str, Any] | None:
    """Extrai um objeto JSON de uma string (ou None).

    >>> extract_json_object('```json\\n{"city": "Floripa"}\\n```')
    {'city': 'Floripa'}
    """
    if not raw or not isinstance(raw, str):
        return None
    text = _FENCE.sub("", raw.strip()).strip()
    for candidate in (text, *_OBJECT.findall(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return None
