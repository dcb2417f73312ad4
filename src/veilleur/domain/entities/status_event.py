"""
StatusEvent entity - externally visible step of a transaction lifecycle.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class EventPhase(str, Enum):
    """Phase reported to callers."""

    PENDING = "pending"
    FAILED = "failed"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class StatusEvent:
    """
    One event in a tracked transaction's status stream.

    Business rules:
    - reason is present only when phase is FAILED
    - FAILED and CONFIRMED are terminal; exactly one ends each stream
    """

    operation_id: str
    phase: EventPhase
    message: str
    reason: Optional[str] = None

    def __post_init__(self):
        """Validate reason/phase pairing."""
        if self.phase == EventPhase.FAILED and self.reason is None:
            raise ValueError("Failed event requires reason")
        if self.phase != EventPhase.FAILED and self.reason is not None:
            raise ValueError("Only failed events carry reason")

    @classmethod
    def pending(cls, operation_id: str, message: str) -> "StatusEvent":
        return cls(operation_id, EventPhase.PENDING, message)

    @classmethod
    def confirmed(cls, operation_id: str, message: str) -> "StatusEvent":
        return cls(operation_id, EventPhase.CONFIRMED, message)

    @classmethod
    def failed(
        cls, operation_id: str, reason: str, message: Optional[str] = None
    ) -> "StatusEvent":
        return cls(
            operation_id,
            EventPhase.FAILED,
            message if message is not None else reason,
            reason,
        )

    @property
    def is_terminal(self) -> bool:
        return self.phase != EventPhase.PENDING

    @property
    def is_confirmed(self) -> bool:
        return self.phase == EventPhase.CONFIRMED

    @property
    def is_failed(self) -> bool:
        return self.phase == EventPhase.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (dapp field names)."""
        data: Dict[str, Any] = {
            "transactionHash": self.operation_id,
            "status": self.phase.value,
            "message": self.message,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data
