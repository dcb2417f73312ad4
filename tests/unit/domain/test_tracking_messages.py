"""
Unit tests for TrackingMessages value object.

Usage:
    pytest tests/unit/domain/test_tracking_messages.py
"""

import pytest
from pydantic import ValidationError

from veilleur.domain.value_objects.tracking_messages import (
    OPERATION_FAILURE_MESSAGES,
    TrackingMessages,
)


class TestTrackingMessages:
    """Tests for message defaults, presets and overrides."""

    def test_defaults(self):
        messages = TrackingMessages()
        assert messages.transaction_pending == "Waiting for transaction to be mined..."
        assert messages.transaction_failed == "Transaction failed"
        assert messages.indexing_success == "Transaction successfully indexed."

    def test_partial_override_keeps_other_defaults(self):
        messages = TrackingMessages(indexing_success="Minted!")
        assert messages.indexing_success == "Minted!"
        assert messages.transaction_dropped == TrackingMessages().transaction_dropped

    def test_for_operation(self):
        messages = TrackingMessages.for_operation("mint")
        assert messages.transaction_failed == OPERATION_FAILURE_MESSAGES["mint"]

    def test_unknown_operation_falls_back_to_transfer(self):
        messages = TrackingMessages.for_operation("teleport")
        assert messages.transaction_failed == OPERATION_FAILURE_MESSAGES["transfer"]

    def test_explicit_override_beats_preset(self):
        messages = TrackingMessages.for_operation("burn", transaction_failed="Nope")
        assert messages.transaction_failed == "Nope"

    @pytest.mark.parametrize("name", ["setCap", "set_cap", "set-cap", "SET_CAP"])
    def test_operation_name_spellings(self, name):
        messages = TrackingMessages.for_operation(name)
        assert messages.transaction_failed == OPERATION_FAILURE_MESSAGES["set_cap"]

    def test_camel_case_set_yield(self):
        messages = TrackingMessages.for_operation("setYield")
        assert messages.transaction_failed == OPERATION_FAILURE_MESSAGES["set_yield"]

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            TrackingMessages(not_a_key="x")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            TrackingMessages().transaction_failed = "x"
