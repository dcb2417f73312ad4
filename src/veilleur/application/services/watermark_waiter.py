"""
Watermark waiter - indexing phase of the transaction lifecycle.

Polls the index tier until its watermark covers the block that mined the
transaction, or until the wall-clock budget runs out.
"""

from typing import AsyncIterator, Optional

from veilleur.application.services.clock import Clock
from veilleur.domain.entities.lifecycle import Lifecycle
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import get_logger
from veilleur.infrastructure.monitoring.metrics import watermark_polls_total

logger = get_logger(__name__)


class WatermarkWaiter:
    """
    Indexing phase poller.

    Emits one pending event on entry, then a single terminal event:
    confirmed once ``indexed_block >= target_block``, failed on timeout.
    The budget is elapsed time since entry, not a poll count; the last
    sleep is clamped so the timeout lands before one extra interval.
    """

    def __init__(
        self,
        index_service: IIndexService,
        clock: Clock,
        polling_interval_seconds: float,
        timeout_seconds: float,
    ):
        """
        Initialize watermark waiter.

        Args:
            index_service: Watermark query collaborator
            clock: Time source for deadline and polling interval
            polling_interval_seconds: Delay between watermark queries
            timeout_seconds: Indexing budget measured from entry
        """
        self.index_service = index_service
        self.clock = clock
        self.polling_interval_seconds = polling_interval_seconds
        self.timeout_seconds = timeout_seconds

    async def wait(
        self,
        operation: OperationRef,
        target_block: int,
        messages: TrackingMessages,
        lifecycle: Lifecycle,
        stream_deadline: Optional[float] = None,
    ) -> AsyncIterator[StatusEvent]:
        """
        Wait for the index tier to reach ``target_block``.

        Args:
            operation: Transaction being tracked
            target_block: Block that mined the transaction
            messages: Message table for emitted events
            lifecycle: State machine of this flow (MINED on entry)
            stream_deadline: Optional clock time ending the whole stream

        Yields:
            Pending event, then one confirmed or failed event

        Raises:
            IndexServiceError: If the watermark query itself fails
        """
        started = self.clock.now()
        deadline = started + self.timeout_seconds
        lifecycle.begin_indexing(deadline)

        yield StatusEvent.pending(operation.id, messages.indexing_pending)

        highest_seen: Optional[int] = None

        while True:
            if stream_deadline is not None and self.clock.now() > stream_deadline:
                lifecycle.time_out_stream()
                logger.warning(
                    f"Stream budget exhausted while indexing {operation.short()}"
                )
                yield StatusEvent.failed(operation.id, messages.stream_timeout)
                return

            watermark = await self.index_service.get_watermark()

            if highest_seen is not None and watermark.indexed_block < highest_seen:
                logger.warning(
                    f"Index watermark went backwards: {highest_seen} -> "
                    f"{watermark.indexed_block}",
                    extra={"indexed_block": watermark.indexed_block},
                )
            if highest_seen is None or watermark.indexed_block > highest_seen:
                highest_seen = watermark.indexed_block

            covered = watermark.covers(target_block)
            watermark_polls_total.labels(covered=str(covered).lower()).inc()

            if covered:
                lifecycle.confirm()
                logger.info(
                    f"Transaction {operation.short()} indexed "
                    f"(watermark {watermark.indexed_block} >= {target_block}) "
                    f"after {self.clock.now() - started:.2f}s",
                    extra={
                        "block_number": target_block,
                        "indexed_block": watermark.indexed_block,
                    },
                )
                yield StatusEvent.confirmed(operation.id, messages.indexing_success)
                return

            remaining = deadline - self.clock.now()
            if remaining <= 0:
                break
            await self.clock.sleep(min(self.polling_interval_seconds, remaining))

        lifecycle.time_out_indexing()
        logger.warning(
            f"Indexing of block {target_block} for {operation.short()} timed out "
            f"after {self.timeout_seconds:.1f}s (last watermark {highest_seen})",
            extra={"block_number": target_block, "indexed_block": highest_seen},
        )
        yield StatusEvent.failed(operation.id, messages.indexing_timeout)
