"""
Unit tests for WatermarkWaiter (indexing phase).

Usage:
    pytest tests/unit/application/test_watermark_waiter.py
"""

from conftest import HASH_A, FakeIndexService, VirtualClock, collect
from veilleur.application.services.watermark_waiter import WatermarkWaiter
from veilleur.domain.entities.lifecycle import Lifecycle, LifecycleState
from veilleur.domain.entities.status_event import EventPhase
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages

INTERVAL = 0.005
TIMEOUT = 0.2
TARGET = 100


def _mined_lifecycle() -> Lifecycle:
    lifecycle = Lifecycle(operation_id=HASH_A, max_attempts=1)
    lifecycle.start_mining()
    lifecycle.record_attempt()
    lifecycle.mark_mined(TARGET)
    return lifecycle


def _wait(watermarks, clock, stream_deadline=None):
    index = FakeIndexService(watermarks)
    waiter = WatermarkWaiter(
        index_service=index,
        clock=clock,
        polling_interval_seconds=INTERVAL,
        timeout_seconds=TIMEOUT,
    )
    lifecycle = _mined_lifecycle()
    stream = waiter.wait(
        OperationRef(id=HASH_A),
        TARGET,
        TrackingMessages(),
        lifecycle,
        stream_deadline,
    )
    return stream, index, lifecycle


class TestWatermarkWaiter:
    """Tests for indexing confirmation and timeout."""

    # ================================================================
    # Confirmation
    # ================================================================

    async def test_confirms_once_watermark_reaches_block(self):
        stream, index, lifecycle = _wait([98, 99, 100], VirtualClock())

        events = await collect(stream)

        assert [e.phase for e in events] == [EventPhase.PENDING, EventPhase.CONFIRMED]
        assert events[0].message == TrackingMessages().indexing_pending
        assert events[-1].message == TrackingMessages().indexing_success
        assert index.calls == 3
        assert lifecycle.state == LifecycleState.CONFIRMED

    async def test_equal_block_confirms(self):
        stream, index, _ = _wait([TARGET], VirtualClock())
        events = await collect(stream)
        assert events[-1].is_confirmed
        assert index.calls == 1

    async def test_watermark_regression_is_tolerated(self):
        stream, index, _ = _wait([60, 40, 101], VirtualClock())
        events = await collect(stream)
        assert events[-1].is_confirmed
        assert index.calls == 3

    async def test_below_target_never_confirms(self):
        stream, index, _ = _wait([TARGET - 1], VirtualClock())

        events = await collect(stream)

        assert not any(e.is_confirmed for e in events)
        assert events[-1].is_failed
        assert index.calls > 1

    # ================================================================
    # Timeout
    # ================================================================

    async def test_timeout_lands_within_one_interval(self):
        clock = VirtualClock()
        started = clock.now()
        stream, _, lifecycle = _wait([0], clock)

        events = await collect(stream)
        elapsed = clock.now() - started

        assert events[-1].is_failed
        assert events[-1].reason == TrackingMessages().indexing_timeout
        assert sum(1 for e in events if e.is_terminal) == 1
        assert elapsed >= TIMEOUT - 1e-9
        assert elapsed < TIMEOUT + INTERVAL
        assert lifecycle.state == LifecycleState.INDEXING_TIMED_OUT
        assert lifecycle.indexing_deadline == started + TIMEOUT

    async def test_stream_deadline_ends_indexing(self):
        clock = VirtualClock()
        stream, _, lifecycle = _wait([0], clock, clock.now() + INTERVAL / 2)

        events = await collect(stream)

        assert events[-1].reason == TrackingMessages().stream_timeout
        assert lifecycle.state == LifecycleState.STREAM_TIMED_OUT
