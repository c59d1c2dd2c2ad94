"""Fuso horário do negócio.

Datas de estadia, cotações e visitas são sempre do calendário local
(Brasília por padrão), nunca do UTC do servidor.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

DEFAULT_UTC_OFFSET_HOURS = -3


def business_timezone(utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS) -> timezone:
    return timezone(timedelta(hours=utc_offset_hours))


def local_date(moment: datetime, tz: timezone) -> date:
    """Dia local de um instante UTC (21h de Brasília ainda é o mesmo dia)."""
    return moment.astimezone(tz).date()
