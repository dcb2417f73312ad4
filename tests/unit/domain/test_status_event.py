"""
Unit tests for StatusEvent entity.

Usage:
    pytest tests/unit/domain/test_status_event.py
"""

import pytest

from veilleur.domain.entities.status_event import EventPhase, StatusEvent

HASH = "0x" + "1" * 64


class TestStatusEvent:
    """Tests for StatusEvent phase rules and wire format."""

    def test_pending_is_not_terminal(self):
        event = StatusEvent.pending(HASH, "waiting")
        assert event.phase == EventPhase.PENDING
        assert not event.is_terminal
        assert event.reason is None

    def test_confirmed_is_terminal(self):
        event = StatusEvent.confirmed(HASH, "done")
        assert event.is_terminal
        assert event.is_confirmed
        assert not event.is_failed

    def test_failed_message_defaults_to_reason(self):
        event = StatusEvent.failed(HASH, "dropped")
        assert event.is_failed
        assert event.message == "dropped"
        assert event.reason == "dropped"

    def test_failed_with_explicit_message(self):
        event = StatusEvent.failed(HASH, "", message="Transaction failed")
        assert event.reason == ""
        assert event.message == "Transaction failed"

    def test_failed_requires_reason(self):
        with pytest.raises(ValueError):
            StatusEvent(HASH, EventPhase.FAILED, "boom")

    def test_reason_rejected_outside_failed(self):
        with pytest.raises(ValueError):
            StatusEvent(HASH, EventPhase.PENDING, "waiting", reason="x")

    def test_to_dict(self):
        assert StatusEvent.pending(HASH, "waiting").to_dict() == {
            "transactionHash": HASH,
            "status": "pending",
            "message": "waiting",
        }
        assert StatusEvent.failed(HASH, "out of gas").to_dict() == {
            "transactionHash": HASH,
            "status": "failed",
            "message": "out of gas",
            "reason": "out of gas",
        }
