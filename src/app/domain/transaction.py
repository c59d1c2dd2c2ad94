"""Transações de pagamento e sua máquina de estados."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - usado em runtime pelo Pydantic
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TransactionStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


# Única transição permitida via conversa
CANCELLABLE_STATUSES = frozenset({TransactionStatus.PENDING})


class Transaction(BaseModel):
    """Transação de pagamento vinculada a uma reserva."""

    model_config = ConfigDict(extra="ignore")

    id: str
    tenant_id: str
    reservation_id: str | None = None
    amount: int = Field(..., ge=0, description="Valor em centavos.")
    status: TransactionStatus = TransactionStatus.PENDING
    notes: str = Field(default="", description="Trilha de auditoria em texto livre.")
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None


def append_audit_note(notes: str, entry: str) -> str:
    """Acrescenta uma linha à trilha de auditoria sem sobrescrever."""
    return f"{notes}\n{entry}" if notes else entry


__all__ = [
    "CANCELLABLE_STATUSES",
    "Transaction",
    "TransactionStatus",
    "append_audit_note",
]
