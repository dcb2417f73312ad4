"""
Receipt entity - execution tier answer for one transaction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReceiptOutcome(str, Enum):
    """Execution outcome reported by the receipt query."""

    PENDING = "pending"
    SUCCESS = "success"
    REVERTED = "reverted"


@dataclass(frozen=True)
class Receipt:
    """
    Result of one receipt query. Created fresh on every poll.

    Business rules:
    - block_number is set iff the transaction left the pending state
    - revert_reason is set iff outcome is REVERTED (may be "")
    - a receipt that was not found is always PENDING
    """

    found: bool
    outcome: ReceiptOutcome = ReceiptOutcome.PENDING
    block_number: Optional[int] = None
    revert_reason: Optional[str] = None

    def __post_init__(self):
        """Validate receipt invariants."""
        if not self.found and self.outcome != ReceiptOutcome.PENDING:
            raise ValueError("Receipt that was not found must be pending")

        mined = self.outcome != ReceiptOutcome.PENDING
        if mined and self.block_number is None:
            raise ValueError(f"{self.outcome.value} receipt requires block_number")
        if not mined and self.block_number is not None:
            raise ValueError("Pending receipt cannot carry block_number")
        if self.block_number is not None and self.block_number < 0:
            raise ValueError("block_number must be non-negative")

        reverted = self.outcome == ReceiptOutcome.REVERTED
        if reverted and self.revert_reason is None:
            raise ValueError("Reverted receipt requires revert_reason")
        if not reverted and self.revert_reason is not None:
            raise ValueError("Only reverted receipts carry revert_reason")

    @classmethod
    def not_found(cls) -> "Receipt":
        return cls(found=False)

    @classmethod
    def pending(cls) -> "Receipt":
        return cls(found=True)

    @classmethod
    def success(cls, block_number: int) -> "Receipt":
        return cls(
            found=True,
            outcome=ReceiptOutcome.SUCCESS,
            block_number=block_number,
        )

    @classmethod
    def reverted(cls, block_number: int, revert_reason: str = "") -> "Receipt":
        return cls(
            found=True,
            outcome=ReceiptOutcome.REVERTED,
            block_number=block_number,
            revert_reason=revert_reason,
        )

    @property
    def is_pending(self) -> bool:
        return self.outcome == ReceiptOutcome.PENDING
