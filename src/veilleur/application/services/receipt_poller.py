"""
Receipt poller - mining phase of the transaction lifecycle.

Polls the execution tier until the transaction is mined, reverted, or the
attempt budget runs out.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Optional, Union

from veilleur.application.services.clock import Clock
from veilleur.domain.entities.lifecycle import Lifecycle
from veilleur.domain.entities.receipt import ReceiptOutcome
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import get_logger
from veilleur.infrastructure.monitoring.metrics import receipt_polls_total

logger = get_logger(__name__)


@dataclass(frozen=True)
class Mined:
    """Internal signal: transaction included successfully in a block."""

    block_number: int


class ReceiptPoller:
    """
    Mining phase poller.

    Yields a pending event per non-terminal poll and ends with either a
    failed event (revert, drop, stream timeout) or a Mined signal. The
    first success receipt is final; nothing is re-polled after it.
    """

    def __init__(
        self,
        execution_service: IExecutionService,
        clock: Clock,
        max_attempts: int,
        delay_seconds: float,
    ):
        """
        Initialize receipt poller.

        Args:
            execution_service: Receipt query collaborator
            clock: Time source for the inter-poll delay
            max_attempts: Receipt queries before declaring a drop
            delay_seconds: Delay between receipt queries
        """
        self.execution_service = execution_service
        self.clock = clock
        self.max_attempts = max_attempts
        self.delay_seconds = delay_seconds

    async def poll(
        self,
        operation: OperationRef,
        messages: TrackingMessages,
        lifecycle: Lifecycle,
        stream_deadline: Optional[float] = None,
    ) -> AsyncIterator[Union[StatusEvent, Mined]]:
        """
        Poll for a receipt.

        Args:
            operation: Transaction to track
            messages: Message table for emitted events
            lifecycle: State machine of this flow (SUBMITTED on entry)
            stream_deadline: Optional clock time ending the whole stream

        Yields:
            StatusEvent for pending/failed steps, Mined on success

        Raises:
            ExecutionServiceError: If the receipt query itself fails
        """
        lifecycle.start_mining()

        for attempt in range(1, self.max_attempts + 1):
            if stream_deadline is not None and self.clock.now() > stream_deadline:
                lifecycle.time_out_stream()
                logger.warning(
                    f"Stream budget exhausted while mining {operation.short()}"
                )
                yield StatusEvent.failed(operation.id, messages.stream_timeout)
                return

            receipt = await self.execution_service.get_receipt(operation)
            lifecycle.record_attempt()
            receipt_polls_total.labels(outcome=receipt.outcome.value).inc()

            if receipt.outcome == ReceiptOutcome.REVERTED:
                lifecycle.fail_mining(receipt.revert_reason)
                logger.warning(
                    f"Transaction {operation.short()} reverted in block "
                    f"{receipt.block_number}: {receipt.revert_reason!r}",
                    extra={"attempt": attempt, "block_number": receipt.block_number},
                )
                yield StatusEvent.failed(
                    operation.id,
                    receipt.revert_reason,
                    message=receipt.revert_reason or messages.transaction_failed,
                )
                return

            if receipt.outcome == ReceiptOutcome.SUCCESS:
                lifecycle.mark_mined(receipt.block_number)
                logger.info(
                    f"Transaction {operation.short()} mined in block "
                    f"{receipt.block_number} after {attempt} attempt(s)",
                    extra={"attempt": attempt, "block_number": receipt.block_number},
                )
                yield Mined(receipt.block_number)
                return

            logger.debug(
                f"No receipt for {operation.short()} "
                f"(attempt {attempt}/{self.max_attempts}, found={receipt.found})",
                extra={"attempt": attempt},
            )
            yield StatusEvent.pending(operation.id, messages.transaction_pending)

            if attempt < self.max_attempts:
                await self.clock.sleep(self.delay_seconds)

        lifecycle.drop()
        logger.warning(
            f"Transaction {operation.short()} not mined after "
            f"{self.max_attempts} attempts, treating as dropped"
        )
        yield StatusEvent.failed(operation.id, messages.transaction_dropped)
