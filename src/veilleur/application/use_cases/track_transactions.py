"""
Wait until every transaction of a group is indexed.
"""

import asyncio
from contextlib import aclosing
from typing import Dict, Iterable, List, Optional, Union

from veilleur.application.use_cases.track_transaction import TrackTransaction
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.exceptions import BatchTrackingError, VeilleurException
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import (
    bind_operation,
    get_logger,
    unbind_operation,
)
from veilleur.infrastructure.monitoring.metrics import batch_runs_total

logger = get_logger(__name__)


class TrackTransactions:
    """
    Use case: durability wait for a group of transactions.

    Runs one TrackTransaction flow per distinct hash concurrently. Never
    aborts early: a failing member does not cancel the others, and the
    call only returns (or raises) once every member reached a terminal
    state.
    """

    def __init__(self, track_transaction: TrackTransaction):
        """
        Initialize use case with dependencies.

        Args:
            track_transaction: Single-transaction tracker shared by flows
        """
        self.track_transaction = track_transaction

    async def execute(
        self,
        operations: Iterable[Union[OperationRef, str]],
        messages: Optional[TrackingMessages] = None,
    ) -> Dict[str, StatusEvent]:
        """
        Track all transactions to a terminal state.

        Args:
            operations: OperationRefs or raw hashes; duplicates collapse
            messages: Message table shared by all members

        Returns:
            Confirmed terminal event per transaction hash, caller order

        Raises:
            InvalidOperationRefError: If any hash is malformed (before
                any tracking starts)
            BatchTrackingError: If any member failed, timed out, or could
                not be tracked; references the first such member in
                caller order
        """
        refs = self._distinct(operations)
        if not refs:
            return {}

        logger.info(f"Waiting for {len(refs)} transaction(s) to be indexed")

        results = await asyncio.gather(
            *(self._track_one(ref, messages) for ref in refs),
            return_exceptions=True,
        )
        outcomes = {ref.id: result for ref, result in zip(refs, results)}

        for operation_id, outcome in outcomes.items():
            if isinstance(outcome, BaseException):
                batch_runs_total.labels(result="error").inc()
                logger.error(
                    f"Batch member {operation_id} could not be tracked: "
                    f"{type(outcome).__name__}: {outcome}"
                )
                raise BatchTrackingError(
                    operation_id, str(outcome), outcomes
                ) from outcome

            if not outcome.is_confirmed:
                batch_runs_total.labels(result="failed").inc()
                logger.warning(
                    f"Batch member {operation_id} failed: {outcome.reason}"
                )
                raise BatchTrackingError(operation_id, outcome.reason, outcomes)

        batch_runs_total.labels(result="confirmed").inc()
        logger.info(f"All {len(refs)} transaction(s) indexed")
        return outcomes

    async def _track_one(
        self,
        operation: OperationRef,
        messages: Optional[TrackingMessages],
    ) -> StatusEvent:
        """Drain one lifecycle stream and return its terminal event."""
        token = bind_operation(operation.id)
        try:
            terminal: Optional[StatusEvent] = None
            async with aclosing(
                self.track_transaction.execute(operation, messages)
            ) as events:
                async for event in events:
                    if event.is_terminal:
                        terminal = event

            if terminal is None:
                raise VeilleurException(
                    f"Tracking of {operation.id} ended without a terminal event",
                    details={"transaction_hash": operation.id},
                )
            return terminal
        finally:
            unbind_operation(token)

    @staticmethod
    def _distinct(
        operations: Iterable[Union[OperationRef, str]],
    ) -> List[OperationRef]:
        seen = set()
        refs = []
        for value in operations:
            ref = OperationRef.coerce(value)
            if ref.id not in seen:
                seen.add(ref.id)
                refs.append(ref)
        return refs
