"""
Domain value objects.
"""

from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import (
    OPERATION_FAILURE_MESSAGES,
    TrackingMessages,
)

__all__ = [
    "OperationRef",
    "TrackingMessages",
    "OPERATION_FAILURE_MESSAGES",
]
