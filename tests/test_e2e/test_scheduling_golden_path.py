"""E2E de agendamento de visita e cancelamento de pagamento."""

from __future__ import annotations

import pytest

from ai.core.heuristic_client import HeuristicModelClient
from app.domain.function_call import FunctionCallStatus
from app.domain.transaction import Transaction, TransactionStatus
from tests.fakes.agent_fakes import TENANT, build_harness, build_services

pytestmark = pytest.mark.e2e


@pytest.mark.asyncio
async def test_visit_scheduling_by_ordinal_reference() -> None:
    harness = build_harness(HeuristicModelClient())

    await harness.send("Quero alugar em Florianópolis para 2 pessoas")
    result = await harness.send("quero visitar o segundo amanhã às 14h")

    assert result.functions_executed == ["schedule_visit"]
    assert "02/06/2025 às 14:00" in result.reply
    visit = harness.services.visits.visits[0]
    assert visit.property_id == "prop-floripa-jurere"


@pytest.mark.asyncio
async def test_free_slots_then_booking() -> None:
    harness = build_harness(HeuristicModelClient())

    await harness.send("Quero alugar em Florianópolis para 2 pessoas")
    slots = await harness.send("posso visitar o segundo amanhã?")

    assert slots.functions_executed == ["check_visit_availability"]
    assert "Apartamento em Jurerê Internacional" in slots.reply
    assert "08:00" in slots.reply
    assert harness.services.visits.visits == []

    booked = await harness.send("quero visitar o segundo amanhã às 9h")
    assert booked.functions_executed == ["schedule_visit"]

    again = await harness.send("posso visitar o segundo amanhã?")
    assert "09:00" not in again.results[0].payload["available_times"]


@pytest.mark.asyncio
async def test_visit_outside_business_hours_is_refused() -> None:
    harness = build_harness(HeuristicModelClient())

    await harness.send("Quero alugar em Florianópolis para 2 pessoas")
    result = await harness.send("quero visitar o primeiro amanhã às 20h")

    assert result.results[0].status == FunctionCallStatus.REJECTED_VALIDATION
    assert "entre 8h e 18h" in result.reply
    assert harness.services.visits.visits == []


@pytest.mark.asyncio
async def test_pending_payment_cancellation() -> None:
    services = build_services(
        transactions=[Transaction(id="tx-1001", tenant_id=TENANT, amount=50000)]
    )
    harness = build_harness(HeuristicModelClient(), services=services)

    result = await harness.send("Quero cancelar o pagamento tx-1001 porque mudei de planos")

    assert result.functions_executed == ["cancel_payment"]
    transaction = await services.transactions.get(TENANT, "tx-1001")
    assert transaction.status == TransactionStatus.CANCELLED
    assert "mudei de planos" in transaction.notes
