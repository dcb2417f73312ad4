"""
Unit tests for OperationRef value object.

Usage:
    pytest tests/unit/domain/test_operation_ref.py
"""

from datetime import datetime, timezone

import pytest

from veilleur.domain.exceptions import InvalidOperationRefError
from veilleur.domain.value_objects.operation_ref import OperationRef

VALID_HASH = "0x" + "ab" * 32


class TestOperationRef:
    """Tests for OperationRef validation and normalisation."""

    def test_valid_hash(self):
        ref = OperationRef(id=VALID_HASH)
        assert ref.id == VALID_HASH
        assert str(ref) == VALID_HASH

    def test_hash_is_lowercased(self):
        ref = OperationRef(id=VALID_HASH.upper().replace("0X", "0x"))
        assert ref.id == VALID_HASH

    def test_surrounding_whitespace_is_stripped(self):
        assert OperationRef(id=f"  {VALID_HASH}\n").id == VALID_HASH

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "0x",
            "ab" * 32,
            "0x" + "ab" * 31,
            "0x" + "ab" * 33,
            "0x" + "zz" * 32,
        ],
    )
    def test_invalid_hash_raises(self, value):
        with pytest.raises(InvalidOperationRefError):
            OperationRef(id=value)

    def test_non_string_raises(self):
        with pytest.raises(InvalidOperationRefError):
            OperationRef(id=None)

    def test_submitted_at_ignored_for_equality(self):
        first = OperationRef(id=VALID_HASH, submitted_at=datetime.now(timezone.utc))
        second = OperationRef(id=VALID_HASH.upper().replace("0X", "0x"))
        assert first == second
        assert hash(first) == hash(second)

    def test_coerce(self):
        ref = OperationRef(id=VALID_HASH)
        assert OperationRef.coerce(ref) is ref
        assert OperationRef.coerce(VALID_HASH) == ref

    def test_short(self):
        short = OperationRef(id=VALID_HASH).short()
        assert short.startswith("0xababab")
        assert short.endswith("ababab")
        assert len(short) < len(VALID_HASH)
