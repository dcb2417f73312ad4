"""
OperationRef value object - Immutable handle to a submitted transaction.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from veilleur.domain.exceptions import InvalidOperationRefError

_HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$")


@dataclass(frozen=True)
class OperationRef:
    """
    Value object identifying one submitted operation.

    Business rules:
    - id is a 32-byte transaction hash: "0x" + 64 hex characters
    - id is stored lower-cased so the same hash always compares equal
    - submitted_at is informational only, never used for equality
    """

    id: str
    submitted_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        """Validate and normalise the transaction hash."""
        if not isinstance(self.id, str) or not self.id:
            raise InvalidOperationRefError("Transaction hash cannot be empty")

        normalized = self.id.strip().lower()
        if not _HASH_PATTERN.match(normalized):
            raise InvalidOperationRefError(
                f"Invalid transaction hash: {self.id}",
                details={"transaction_hash": self.id},
            )

        # frozen dataclass: bypass __setattr__ for normalisation
        object.__setattr__(self, "id", normalized)

    @classmethod
    def coerce(cls, value: Union["OperationRef", str]) -> "OperationRef":
        """Accept either an OperationRef or a raw hash string."""
        if isinstance(value, OperationRef):
            return value
        return cls(id=value)

    def short(self) -> str:
        """Abbreviated hash for log lines."""
        return f"{self.id[:10]}…{self.id[-6:]}"

    def __str__(self) -> str:
        return self.id
