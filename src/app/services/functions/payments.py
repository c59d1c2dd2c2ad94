"""Handler de cancelamento de pagamento.

Só transações ``pending`` podem ir para ``cancelled``. Qualquer outro
status é recusado sem alterar a transação. A nota de auditoria é
acrescentada, nunca sobrescrita.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.function_call import FunctionCallResult, executed
from app.domain.pricing import format_brl
from app.domain.transaction import (
    CANCELLABLE_STATUSES,
    TransactionStatus,
    append_audit_note,
)
from utils.errors import PreconditionError, ValidationError

if TYPE_CHECKING:
    from app.domain.function_call import FunctionCallRequest
    from app.services.function_registry import HandlerEnv
    from app.services.functions.schemas import CancelPaymentArgs

_ACTOR_LABELS = {"client": "cliente", "agent": "agente"}


async def cancel_payment(
    args: CancelPaymentArgs,
    request: FunctionCallRequest,
    env: HandlerEnv,
) -> FunctionCallResult:
    repository = env.services.transactions
    transaction = await repository.get(request.tenant_id, args.transaction_id)
    if transaction is None:
        raise ValidationError(
            f"Não encontrei a transação {args.transaction_id}. Pode conferir o código?",
            errors=[{"field": "transactionId", "message": "transação não encontrada"}],
        )

    if transaction.status not in CANCELLABLE_STATUSES:
        raise PreconditionError(
            f"Não é possível cancelar: a transação {transaction.id} está com status "
            f"'{transaction.status.value}'. Só pagamentos pendentes podem ser cancelados.",
            current_status=transaction.status.value,
        )

    now = env.now
    actor = _ACTOR_LABELS[args.cancelled_by]
    note = f"[{now.isoformat(timespec='seconds')}] Cancelado por {actor}: {args.reason}"
    updated = await repository.update(
        transaction.model_copy(
            update={
                "status": TransactionStatus.CANCELLED,
                "notes": append_audit_note(transaction.notes, note),
                "cancelled_at": now,
                "cancelled_by": args.cancelled_by,
            }
        )
    )
    return executed(
        "cancel_payment",
        (
            f"Pagamento {updated.id} de {format_brl(updated.amount)} cancelado. "
            "Se precisar, posso ajudar com uma nova reserva."
        ),
        transaction_id=updated.id,
        status=updated.status.value,
    )
