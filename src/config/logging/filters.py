"""Filter de logging que carimba cada record com o contexto do turno.

Campos garantidos em todo record:
- service: nome do serviço (ex: sofia_agent)
- correlation_id: request_id do turno em andamento
- tenant_id: imobiliária dona da conversa

Valores passados explicitamente via ``extra`` têm precedência. Telefones
que cheguem em ``customer_phone`` ou ``phone`` saem só com os 4 últimos
dígitos.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

PHONE_FIELDS = ("customer_phone", "phone")


def mask_phone_digits(value: object) -> str:
    digits = "".join(ch for ch in str(value) if ch.isdigit())
    return f"***{digits[-4:]}" if len(digits) > 4 else "***"


def _empty() -> str:
    return ""


class TurnContextFilter(logging.Filter):
    """Injeta service, correlation_id e tenant_id; mascara telefones."""

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
        tenant_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._getters = {
            "correlation_id": correlation_id_getter or _empty,
            "tenant_id": tenant_id_getter or _empty,
        }

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self._service_name
        for field, getter in self._getters.items():
            if not getattr(record, field, None):
                setattr(record, field, getter())
        for field in PHONE_FIELDS:
            raw = getattr(record, field, None)
            if raw:
                setattr(record, field, mask_phone_digits(raw))
        return True
