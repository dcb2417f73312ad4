"""
Test fixtures and configuration.

Upstream services are replaced by scripted fakes and time by a virtual
clock, so lifecycle tests run instantly with production-sized budgets.
"""

import asyncio
from typing import List, Optional, Sequence, Union

import pytest

from veilleur.application.services.clock import Clock
from veilleur.application.transaction_tracker import TransactionTracker
from veilleur.config.settings import TrackingConfig
from veilleur.domain.entities.receipt import Receipt
from veilleur.domain.entities.watermark import Watermark
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.domain.value_objects.operation_ref import OperationRef

HASH_A = "0x" + "a" * 64
HASH_B = "0x" + "b" * 64
HASH_C = "0x" + "c" * 64


class VirtualClock(Clock):
    """Clock whose sleeps advance time instantly."""

    def __init__(self, start: float = 1000.0):
        self.time = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.time

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += max(0.0, seconds)
        # Keep the loop cooperative so concurrent flows interleave
        await asyncio.sleep(0)


class FakeExecutionService(IExecutionService):
    """
    Scripted receipt service.

    Returns the scripted receipts in order, repeating the last one once
    the script runs out. Exceptions in the script are raised.
    """

    def __init__(
        self,
        receipts: Sequence[Union[Receipt, Exception]],
        clock: Optional[VirtualClock] = None,
        latency: float = 0.0,
    ):
        self.receipts = list(receipts)
        self.clock = clock
        self.latency = latency
        self.calls: List[str] = []
        self.closed = False

    async def get_receipt(self, operation: OperationRef) -> Receipt:
        index = min(len(self.calls), len(self.receipts) - 1)
        self.calls.append(operation.id)
        if self.latency and self.clock is not None:
            await self.clock.sleep(self.latency)
        else:
            await asyncio.sleep(0)
        result = self.receipts[index]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


class RoutedExecutionService(IExecutionService):
    """Receipt service with one scripted fake per transaction hash."""

    def __init__(self, routes: dict):
        self.routes = routes

    async def get_receipt(self, operation: OperationRef) -> Receipt:
        return await self.routes[operation.id].get_receipt(operation)


class FakeIndexService(IIndexService):
    """Scripted watermark service; repeats the last value."""

    def __init__(self, watermarks: Sequence[Union[int, Exception]]):
        self.watermarks = list(watermarks)
        self.calls = 0
        self.closed = False

    async def get_watermark(self) -> Watermark:
        index = min(self.calls, len(self.watermarks) - 1)
        self.calls += 1
        await asyncio.sleep(0)
        result = self.watermarks[index]
        if isinstance(result, Exception):
            raise result
        return Watermark(indexed_block=result)

    async def close(self) -> None:
        self.closed = True


def make_config(**overrides) -> TrackingConfig:
    """Tracking config with compressed but realistic budgets."""
    values = {
        "max_attempts": 3,
        "delay_ms": 10,
        "polling_interval_ms": 5,
        "timeout_ms": 200,
    }
    values.update(overrides)
    return TrackingConfig(**values)


async def collect(stream) -> list:
    """Drain an async iterator into a list."""
    return [event async for event in stream]


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def tracker_factory(clock):
    """Build a TransactionTracker over scripted fakes."""

    def factory(
        receipts,
        watermarks=(0,),
        **config_overrides,
    ):
        execution = FakeExecutionService(receipts)
        index = FakeIndexService(watermarks)
        tracker = TransactionTracker(
            execution_service=execution,
            index_service=index,
            config=make_config(**config_overrides),
            clock=clock,
        )
        return tracker, execution, index

    return factory
