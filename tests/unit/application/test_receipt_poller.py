"""
Unit tests for ReceiptPoller (mining phase).

Usage:
    pytest tests/unit/application/test_receipt_poller.py
"""

import pytest

from conftest import HASH_A, FakeExecutionService, VirtualClock, collect
from veilleur.application.services.receipt_poller import Mined, ReceiptPoller
from veilleur.domain.entities.lifecycle import Lifecycle, LifecycleState
from veilleur.domain.entities.receipt import Receipt
from veilleur.domain.entities.status_event import EventPhase
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages

MAX_ATTEMPTS = 3
DELAY = 0.01


def _poll(receipts, clock, stream_deadline=None):
    execution = FakeExecutionService(receipts)
    poller = ReceiptPoller(
        execution_service=execution,
        clock=clock,
        max_attempts=MAX_ATTEMPTS,
        delay_seconds=DELAY,
    )
    lifecycle = Lifecycle(operation_id=HASH_A, max_attempts=MAX_ATTEMPTS)
    stream = poller.poll(
        OperationRef(id=HASH_A), TrackingMessages(), lifecycle, stream_deadline
    )
    return stream, execution, lifecycle


class TestReceiptPoller:
    """Tests for receipt polling outcomes."""

    # ================================================================
    # Drop (attempt budget)
    # ================================================================

    async def test_never_mined_emits_max_attempts_pending_then_dropped(self):
        clock = VirtualClock()
        stream, execution, lifecycle = _poll([Receipt.pending()], clock)

        events = await collect(stream)

        assert [e.phase for e in events] == [EventPhase.PENDING] * MAX_ATTEMPTS + [
            EventPhase.FAILED
        ]
        assert events[-1].reason == TrackingMessages().transaction_dropped
        assert len(execution.calls) == MAX_ATTEMPTS
        assert lifecycle.state == LifecycleState.MINING_DROPPED
        # No sleep after the final attempt
        assert clock.sleeps == [DELAY] * (MAX_ATTEMPTS - 1)

    async def test_not_found_counts_as_pending(self):
        stream, execution, _ = _poll([Receipt.not_found()], VirtualClock())
        events = await collect(stream)
        assert sum(1 for e in events if e.phase == EventPhase.PENDING) == MAX_ATTEMPTS
        assert events[-1].is_failed

    # ================================================================
    # Revert
    # ================================================================

    @pytest.mark.parametrize("k", [1, 2, MAX_ATTEMPTS])
    async def test_revert_on_attempt_k(self, k):
        receipts = [Receipt.pending()] * (k - 1) + [
            Receipt.reverted(55, "Ownable: caller is not the owner")
        ]
        stream, execution, lifecycle = _poll(receipts, VirtualClock())

        events = await collect(stream)

        assert [e.phase for e in events[:-1]] == [EventPhase.PENDING] * (k - 1)
        assert events[-1].is_failed
        assert events[-1].reason == "Ownable: caller is not the owner"
        assert events[-1].message == "Ownable: caller is not the owner"
        assert len(execution.calls) == k
        assert lifecycle.state == LifecycleState.MINING_FAILED

    async def test_revert_without_reason_uses_failed_message(self):
        stream, _, _ = _poll([Receipt.reverted(3)], VirtualClock())
        events = await collect(stream)
        assert len(events) == 1
        assert events[-1].reason == ""
        assert events[-1].message == TrackingMessages().transaction_failed

    # ================================================================
    # Success
    # ================================================================

    async def test_success_yields_mined_signal(self):
        stream, execution, lifecycle = _poll(
            [Receipt.pending(), Receipt.success(100)], VirtualClock()
        )

        items = await collect(stream)

        assert items[0].phase == EventPhase.PENDING
        assert items[-1] == Mined(block_number=100)
        assert len(execution.calls) == 2
        assert lifecycle.state == LifecycleState.MINED
        assert lifecycle.block_number == 100

    # ================================================================
    # Stream budget
    # ================================================================

    async def test_stream_deadline_ends_mining(self):
        clock = VirtualClock()
        deadline = clock.now() + DELAY * 1.5
        stream, execution, lifecycle = _poll([Receipt.pending()], clock, deadline)

        events = await collect(stream)

        assert [e.phase for e in events] == [
            EventPhase.PENDING,
            EventPhase.PENDING,
            EventPhase.FAILED,
        ]
        assert events[-1].reason == TrackingMessages().stream_timeout
        assert len(execution.calls) == 2
        assert lifecycle.state == LifecycleState.STREAM_TIMED_OUT
