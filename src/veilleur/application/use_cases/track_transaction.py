"""
Track a single transaction through mining and indexing.
"""

from contextlib import aclosing
from typing import AsyncIterator, Optional, Union

from veilleur.application.services.clock import Clock, SystemClock
from veilleur.application.services.receipt_poller import Mined, ReceiptPoller
from veilleur.application.services.watermark_waiter import WatermarkWaiter
from veilleur.config.settings import TrackingConfig
from veilleur.domain.entities.lifecycle import Lifecycle
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import get_logger
from veilleur.infrastructure.monitoring.metrics import (
    tracked_transactions_active,
    tracking_duration_seconds,
    tracking_outcomes_total,
)

logger = get_logger(__name__)


class TrackTransaction:
    """
    Use case: stream the lifecycle of one submitted transaction.

    Pure sequencing: the receipt poller runs first; on a Mined signal the
    watermark waiter takes over with the mined block. Sub-component
    events are relayed unchanged, so each stream has exactly one
    terminal event and never confirms before mining succeeded.

    The stream is consumer-pulled. A consumer that stops iterating (or
    closes the generator) stops all further upstream queries.
    """

    def __init__(
        self,
        execution_service: IExecutionService,
        index_service: IIndexService,
        config: Optional[TrackingConfig] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize use case with dependencies.

        Args:
            execution_service: Receipt query collaborator
            index_service: Watermark query collaborator
            config: Timing budget (defaults: 30 x 2s, 500ms, 180s)
            clock: Time source (defaults to the event loop clock)
        """
        self.config = config or TrackingConfig()
        self.clock = clock or SystemClock()
        self.receipt_poller = ReceiptPoller(
            execution_service=execution_service,
            clock=self.clock,
            max_attempts=self.config.max_attempts,
            delay_seconds=self.config.delay_seconds,
        )
        self.watermark_waiter = WatermarkWaiter(
            index_service=index_service,
            clock=self.clock,
            polling_interval_seconds=self.config.polling_interval_seconds,
            timeout_seconds=self.config.timeout_seconds,
        )

    async def execute(
        self,
        operation: Union[OperationRef, str],
        messages: Optional[TrackingMessages] = None,
    ) -> AsyncIterator[StatusEvent]:
        """
        Track transaction until a terminal state.

        Args:
            operation: OperationRef or raw transaction hash
            messages: Message table (defaults when omitted)

        Yields:
            StatusEvent: pending events, then exactly one failed or
            confirmed event

        Raises:
            InvalidOperationRefError: If the hash is malformed
            ExecutionServiceError: If the receipt query fails
            IndexServiceError: If the watermark query fails
        """
        operation = OperationRef.coerce(operation)
        messages = messages or TrackingMessages()
        lifecycle = Lifecycle(
            operation_id=operation.id,
            max_attempts=self.config.max_attempts,
        )

        started = self.clock.now()
        stream_timeout = self.config.stream_timeout_seconds
        stream_deadline = started + stream_timeout if stream_timeout is not None else None

        logger.info(f"Tracking transaction {operation.short()}")
        tracked_transactions_active.inc()

        try:
            block_number: Optional[int] = None

            async with aclosing(
                self.receipt_poller.poll(
                    operation, messages, lifecycle, stream_deadline
                )
            ) as mining_events:
                async for item in mining_events:
                    if isinstance(item, Mined):
                        block_number = item.block_number
                        continue
                    yield item

            if block_number is None:
                return

            async with aclosing(
                self.watermark_waiter.wait(
                    operation, block_number, messages, lifecycle, stream_deadline
                )
            ) as indexing_events:
                async for event in indexing_events:
                    yield event

        finally:
            tracked_transactions_active.dec()
            if lifecycle.is_terminal:
                elapsed = self.clock.now() - started
                tracking_outcomes_total.labels(state=lifecycle.state.value).inc()
                tracking_duration_seconds.labels(
                    state=lifecycle.state.value
                ).observe(elapsed)
                logger.info(
                    f"Tracking of {operation.short()} finished: "
                    f"{lifecycle.state.value} after {elapsed:.2f}s"
                )
            else:
                logger.debug(
                    f"Tracking of {operation.short()} stopped in state "
                    f"{lifecycle.state.value}"
                )
