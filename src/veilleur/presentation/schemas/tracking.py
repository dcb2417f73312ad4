"""
Transaction tracking schemas.

Wire field names follow the dapp contract (camelCase).
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from veilleur.domain.entities.status_event import StatusEvent


class TrackingMessagesOverride(BaseModel):
    """Optional message overrides; omitted keys keep their defaults."""

    transactionPending: Optional[str] = None
    transactionFailed: Optional[str] = None
    transactionDropped: Optional[str] = None
    indexingPending: Optional[str] = None
    indexingSuccess: Optional[str] = None
    indexingTimeout: Optional[str] = None
    streamTimeout: Optional[str] = None

    def to_overrides(self) -> dict:
        """Map camelCase wire keys onto TrackingMessages field names."""
        mapping = {
            "transactionPending": "transaction_pending",
            "transactionFailed": "transaction_failed",
            "transactionDropped": "transaction_dropped",
            "indexingPending": "indexing_pending",
            "indexingSuccess": "indexing_success",
            "indexingTimeout": "indexing_timeout",
            "streamTimeout": "stream_timeout",
        }
        return {
            mapping[key]: value
            for key, value in self.model_dump().items()
            if value is not None
        }


class StatusEventResponse(BaseModel):
    """One status event."""

    transactionHash: str = Field(..., description="Tracked transaction hash")
    status: str = Field(..., description="pending, failed or confirmed")
    message: str = Field(..., description="Human-readable status")
    reason: Optional[str] = Field(None, description="Failure reason")

    @classmethod
    def from_event(cls, event: StatusEvent) -> "StatusEventResponse":
        return cls(**event.to_dict())


class WaitForTransactionsRequest(BaseModel):
    """
    Request to wait until a group of transactions is indexed.

    Corresponds to: POST /transactions/wait
    """

    transactionHashes: List[str] = Field(..., min_length=1, max_length=100)
    operation: Optional[str] = Field(
        None,
        description="Operation name for message presets (mint, burn, ...)",
    )
    messages: Optional[TrackingMessagesOverride] = None


class WaitForTransactionsResponse(BaseModel):
    """Terminal outcome of every transaction in the group."""

    confirmed: bool = Field(..., description="All transactions indexed")
    failedTransactionHash: Optional[str] = Field(
        None,
        description="First failing transaction, in request order",
    )
    reason: Optional[str] = Field(None, description="Failure reason")
    results: List[StatusEventResponse] = Field(default_factory=list)
