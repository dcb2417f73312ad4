"""
Transaction tracker facade.

Caller-facing surface: ``track`` for a live status stream of one
transaction, ``track_all`` for a durability wait over a group.
"""

from typing import AsyncIterator, Dict, Iterable, Optional, Union

from veilleur.application.services.clock import Clock
from veilleur.application.use_cases.track_transaction import TrackTransaction
from veilleur.application.use_cases.track_transactions import TrackTransactions
from veilleur.config.settings import TrackingConfig
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages


class TransactionTracker:
    """Bundles the single and batch tracking use cases."""

    def __init__(
        self,
        execution_service: IExecutionService,
        index_service: IIndexService,
        config: Optional[TrackingConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self._track = TrackTransaction(
            execution_service=execution_service,
            index_service=index_service,
            config=config,
            clock=clock,
        )
        self._track_all = TrackTransactions(self._track)

    @property
    def config(self) -> TrackingConfig:
        return self._track.config

    def track(
        self,
        operation: Union[OperationRef, str],
        messages: Optional[TrackingMessages] = None,
    ) -> AsyncIterator[StatusEvent]:
        """Status stream for one transaction (see TrackTransaction)."""
        return self._track.execute(operation, messages)

    async def track_all(
        self,
        operations: Iterable[Union[OperationRef, str]],
        messages: Optional[TrackingMessages] = None,
    ) -> Dict[str, StatusEvent]:
        """Wait for every transaction to be indexed (see TrackTransactions)."""
        return await self._track_all.execute(operations, messages)
