"""
API schemas.
"""

from veilleur.presentation.schemas.tracking import (
    StatusEventResponse,
    TrackingMessagesOverride,
    WaitForTransactionsRequest,
    WaitForTransactionsResponse,
)

__all__ = [
    "StatusEventResponse",
    "TrackingMessagesOverride",
    "WaitForTransactionsRequest",
    "WaitForTransactionsResponse",
]
