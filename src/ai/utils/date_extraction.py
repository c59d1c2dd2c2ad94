"""Extração de datas e horários em português a partir de texto livre.

Reconhece intervalos ("do dia 1 ao dia 5 de janeiro de 2024",
"de 10/07 a 15/07", "2025-07-10 a 2025-07-15"), datas isoladas
("amanhã", "dia 12 de agosto") e horários ("às 14h", "15:30").

Regras de ano quando não informado: usa o ano corrente; se a entrada já
passou, usa o próximo ano. A saída ganha +1 ano quando o mês dela é
anterior ao da entrada (virada de ano). Intervalos invertidos no mesmo
mês NÃO são corrigidos: cabe à validação rejeitá-los.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

from utils.text import normalize_text

MONTHS: dict[str, int] = {
    "janeiro": 1,
    "fevereiro": 2,
    "marco": 3,
    "abril": 4,
    "maio": 5,
    "junho": 6,
    "julho": 7,
    "agosto": 8,
    "setembro": 9,
    "outubro": 10,
    "novembro": 11,
    "dezembro": 12,
}

_MONTH = "|".join(MONTHS)

_TEXT_RANGE = re.compile(
    rf"(?:do\s+)?(?:dia\s+)?(\d{{1,2}})(?:\s+de\s+({_MONTH}))?(?:\s+de\s+(\d{{4}}))?"
    rf"\s+(?:ao|a|ate)\s+(?:o\s+)?(?:dia\s+)?(\d{{1,2}})\s+de\s+({_MONTH})"
    rf"(?:\s+de\s+(\d{{4}}))?"
)
_NUMERIC_RANGE = re.compile(
    r"(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\s+(?:ao|a|ate|-)\s+(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?"
)
_ISO_RANGE = re.compile(r"(\d{4}-\d{2}-\d{2})\s+(?:ao|a|ate|-)\s+(\d{4}-\d{2}-\d{2})")

_TEXT_DATE = re.compile(
    rf"(?:dia\s+)?(\d{{1,2}})\s+de\s+({_MONTH})(?:\s+de\s+(\d{{4}}))?"
)
_NUMERIC_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b")
_ISO_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

_TIME = re.compile(r"\b(?:as\s+)?([01]?\d|2[0-3])(?::|h)([0-5]\d)?\b")

_WEEKDAYS = {
    "segunda": 0,
    "terca": 1,
    "quarta": 2,
    "quinta": 3,
    "sexta": 4,
    "sabado": 5,
    "domingo": 6,
}


@dataclass(frozen=True, slots=True)
class DateRange:
    check_in: date
    check_out: date


def _year(raw: str | None) -> int | None:
    if not raw:
        return None
    value = int(raw)
    return value + 2000 if value < 100 else value


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _resolve_range(
    start_day: int,
    start_month: int,
    start_year: int | None,
    end_day: int,
    end_month: int,
    end_year: int | None,
    today: date,
) -> DateRange | None:
    if start_year is None:
        start_year = end_year
    if start_year is None:
        start_year = today.year
        start = _safe_date(start_year, start_month, start_day)
        if start is not None and start < today:
            start_year += 1
    if end_year is None:
        end_year = start_year + 1 if end_month < start_month else start_year

    start = _safe_date(start_year, start_month, start_day)
    end = _safe_date(end_year, end_month, end_day)
    if start is None or end is None:
        return None
    return DateRange(check_in=start, check_out=end)


def extract_date_range(text: str, today: date) -> DateRange | None:
    """Primeiro intervalo de datas citado no texto (ou None)."""
    normalized = normalize_text(text)

    match = _ISO_RANGE.search(normalized)
    if match:
        try:
            return DateRange(
                check_in=date.fromisoformat(match.group(1)),
                check_out=date.fromisoformat(match.group(2)),
            )
        except ValueError:
            return None

    match = _TEXT_RANGE.search(normalized)
    if match:
        end_month = MONTHS[match.group(5)]
        start_month = MONTHS[match.group(2)] if match.group(2) else end_month
        return _resolve_range(
            int(match.group(1)),
            start_month,
            _year(match.group(3)),
            int(match.group(4)),
            end_month,
            _year(match.group(6)),
            today,
        )

    match = _NUMERIC_RANGE.search(normalized)
    if match:
        return _resolve_range(
            int(match.group(1)),
            int(match.group(2)),
            _year(match.group(3)),
            int(match.group(4)),
            int(match.group(5)),
            _year(match.group(6)),
            today,
        )
    return None


def extract_single_date(text: str, today: date) -> date | None:
    """Data isolada: hoje, amanhã, dia da semana, "dia 12 de agosto", 12/08."""
    normalized = normalize_text(text)

    if re.search(r"\bdepois de amanha\b", normalized):
        return today + timedelta(days=2)
    if re.search(r"\bamanha\b", normalized):
        return today + timedelta(days=1)
    if re.search(r"\bhoje\b", normalized):
        return today

    match = _ISO_DATE.search(normalized)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None

    day = month = None
    year: int | None = None
    match = _TEXT_DATE.search(normalized)
    if match:
        day, month, year = int(match.group(1)), MONTHS[match.group(2)], _year(match.group(3))
    else:
        match = _NUMERIC_DATE.search(normalized)
        if match:
            day, month, year = int(match.group(1)), int(match.group(2)), _year(match.group(3))

    if day is not None and month is not None:
        if year is not None:
            return _safe_date(year, month, day)
        candidate = _safe_date(today.year, month, day)
        if candidate is not None and candidate < today:
            candidate = _safe_date(today.year + 1, month, day)
        return candidate

    for name, weekday in _WEEKDAYS.items():
        if re.search(rf"\b{name}(?:-feira)?\b", normalized):
            ahead = (weekday - today.weekday()) % 7 or 7
            return today + timedelta(days=ahead)
    return None


def extract_time(text: str) -> str | None:
    """Horário no formato HH:MM ("às 14h" -> "14:00")."""
    normalized = normalize_text(text)
    match = _TIME.search(normalized)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        return f"{hour:02d}:{minute:02d}"
    return None
