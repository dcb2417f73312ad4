"""
Domain exceptions.
"""

from veilleur.domain.exceptions.tracking_exceptions import (
    BatchTrackingError,
    ExecutionServiceError,
    IndexServiceError,
    InvalidOperationRefError,
    InvalidTransitionError,
    UpstreamServiceError,
    VeilleurException,
)

__all__ = [
    "VeilleurException",
    "InvalidOperationRefError",
    "InvalidTransitionError",
    "UpstreamServiceError",
    "ExecutionServiceError",
    "IndexServiceError",
    "BatchTrackingError",
]
