"""Testes do InFlightRegistry (tasks estacionadas de turnos interrompidos)."""

from __future__ import annotations

import asyncio

import pytest

from app.domain.function_call import FunctionCallResult, executed
from app.use_cases.agent._inflight import InFlightCall, InFlightRegistry
from tests.fakes.agent_fakes import FakeClock

RETENTION = 600


async def _sent() -> FunctionCallResult:
    return executed("send_property_media", "Fotos enviadas.")


async def _finished(registry: InFlightRegistry) -> InFlightCall:
    task = asyncio.create_task(_sent())
    call = registry.track("send_property_media", "hash-1", task)
    await task
    await asyncio.sleep(0)  # done callback roda no próximo ciclo do loop
    return call


class TestPrune:
    @pytest.mark.asyncio
    async def test_abandoned_conversation_is_dropped_on_next_park(self) -> None:
        """Conversa que nunca mais escreveu não retém a task para sempre."""
        clock = FakeClock()
        registry = InFlightRegistry(clock, retention_seconds=RETENTION)
        registry.park("tenant-a:abandonada", [await _finished(registry)])
        assert len(registry) == 1

        clock.advance(RETENTION + 1)
        registry.park("tenant-a:outra", [await _finished(registry)])

        assert len(registry) == 1
        assert registry.running_pairs("tenant-a:abandonada") == set()

    @pytest.mark.asyncio
    async def test_recent_and_running_calls_are_kept(self) -> None:
        clock = FakeClock()
        registry = InFlightRegistry(clock, retention_seconds=RETENTION)
        blocker = asyncio.Event()
        running = registry.track("schedule_visit", "hash-2", asyncio.create_task(blocker.wait()))
        registry.park("k", [await _finished(registry), running])

        clock.advance(RETENTION - 1)
        assert registry.prune() == 0

        clock.advance(RETENTION * 10)
        assert registry.prune() == 1
        assert registry.running_pairs("k") == {("schedule_visit", "hash-2")}

        blocker.set()
        await running.task
