"""
TrackingMessages value object - caller-supplied copy for status events.

Control flow never depends on these strings; they only end up in the
``message`` / ``reason`` fields of emitted events.
"""

import re
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

# Operation-specific failure copy; every other key shares the defaults.
OPERATION_FAILURE_MESSAGES: Dict[str, str] = {
    "mint": "Failed to mint tokens",
    "burn": "Failed to burn tokens",
    "transfer": "Failed to transfer tokens",
    "approve": "Failed to approve tokens",
    "freeze": "Failed to freeze account",
    "pause": "Failed to pause token",
    "redeem": "Failed to redeem tokens",
    "recovery": "Failed to recover tokens",
    "set_cap": "Failed to update cap",
    "set_yield": "Failed to update yield schedule",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_operation(operation: str) -> str:
    """Map wire spellings (setCap, set-cap, SET_CAP) onto preset keys."""
    return _CAMEL_BOUNDARY.sub("_", operation.strip()).replace("-", "_").lower()


class TrackingMessages(BaseModel):
    """
    Human-readable message table for one tracked operation.

    Missing keys fall back to the defaults below, so callers only pass
    the copy they want to change.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    transaction_pending: str = Field(
        default="Waiting for transaction to be mined...",
    )
    transaction_failed: str = Field(default="Transaction failed")
    transaction_dropped: str = Field(
        default="Transaction was dropped from the network. Please try again.",
    )
    indexing_pending: str = Field(
        default="Transaction confirmed. Waiting for indexing...",
    )
    indexing_success: str = Field(default="Transaction successfully indexed.")
    indexing_timeout: str = Field(
        default=(
            "Indexing is taking longer than expected. "
            "Data will be available soon."
        ),
    )
    stream_timeout: str = Field(
        default="Transaction tracking timed out. Please check the status later.",
    )

    @classmethod
    def for_operation(cls, operation: str, **overrides: str) -> "TrackingMessages":
        """
        Build messages for a named operation (mint, burn, ...).

        Accepts camelCase wire names (setCap) as well as snake_case.
        Unknown operations fall back to the transfer copy, matching how
        the dapp picks its defaults.

        Args:
            operation: Operation name
            **overrides: Explicit message overrides (win over presets)

        Returns:
            TrackingMessages instance
        """
        failure = OPERATION_FAILURE_MESSAGES.get(
            normalize_operation(operation), OPERATION_FAILURE_MESSAGES["transfer"]
        )
        values = {"transaction_failed": failure}
        values.update(overrides)
        return cls(**values)
