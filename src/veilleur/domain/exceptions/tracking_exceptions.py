"""
Transaction tracking exceptions.

Business outcomes (reverts, drops, indexing timeouts) are not exceptions:
they travel as failed status events. These types cover invalid input,
programming errors in the state machine, and upstream services that
cannot answer at all.
"""

from typing import Any, Dict, Optional


class VeilleurException(Exception):
    """Base exception for tracker operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidOperationRefError(VeilleurException):
    """Operation identifier is not a 32-byte hex hash."""


class InvalidTransitionError(VeilleurException):
    """Lifecycle state machine asked to move along a missing edge."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Invalid lifecycle transition: {current} -> {target}",
            details={"current": current, "target": target},
        )
        self.current = current
        self.target = target


class UpstreamServiceError(VeilleurException):
    """Upstream service call failed at the transport level."""


class ExecutionServiceError(UpstreamServiceError):
    """Execution tier (receipt query) unreachable or malformed."""


class IndexServiceError(UpstreamServiceError):
    """Index tier (watermark query) unreachable or malformed."""


class BatchTrackingError(VeilleurException):
    """
    At least one member of a batch did not reach CONFIRMED.

    Raised only after every member reached a terminal state.

    Attributes:
        operation_id: First failing member, in caller order
        reason: Failure reason of that member
        outcomes: Terminal event (or exception) for every member
    """

    def __init__(
        self,
        operation_id: str,
        reason: str,
        outcomes: Dict[str, Any],
    ):
        failed = [
            op_id
            for op_id, outcome in outcomes.items()
            if isinstance(outcome, BaseException) or not outcome.is_confirmed
        ]
        super().__init__(
            f"Transaction {operation_id} did not complete: {reason}",
            details={"operation_id": operation_id, "failed": failed},
        )
        self.operation_id = operation_id
        self.reason = reason
        self.outcomes = outcomes
        self.failed = failed
