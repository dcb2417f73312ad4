"""
Transaction tracking API routes.

- GET  /transactions/{hash}/track: live status stream (server-sent events)
- POST /transactions/wait: durability wait for a group of transactions
"""

import json
from contextlib import aclosing
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import StreamingResponse

from veilleur.application.transaction_tracker import TransactionTracker
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.exceptions import BatchTrackingError, UpstreamServiceError
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import get_logger
from veilleur.presentation.schemas.tracking import (
    StatusEventResponse,
    WaitForTransactionsRequest,
    WaitForTransactionsResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

# Client reconnect delay advertised on every event (ms)
SSE_RETRY_MS = 1000


def format_sse(
    operation_id: str,
    payload: dict,
    event: Optional[str] = None,
) -> str:
    """Serialise one server-sent event frame."""
    lines = [f"id: {operation_id}", f"retry: {SSE_RETRY_MS}"]
    if event:
        lines.append(f"event: {event}")
    lines.append(f"data: {json.dumps(payload)}")
    return "\n".join(lines) + "\n\n"


def _get_tracker(req: Request) -> TransactionTracker:
    return req.app.state.container.tracker


def _build_messages(operation: Optional[str], overrides: dict) -> TrackingMessages:
    if operation:
        return TrackingMessages.for_operation(operation, **overrides)
    return TrackingMessages(**overrides)


async def _stream_events(
    tracker: TransactionTracker,
    operation: OperationRef,
    messages: TrackingMessages,
) -> AsyncIterator[str]:
    """
    Relay tracker events as SSE frames.

    A client disconnect cancels this generator at its current await;
    aclosing() then closes the tracker stream so no upstream query
    follows.
    """
    try:
        async with aclosing(tracker.track(operation, messages)) as events:
            async for event in events:
                yield format_sse(operation.id, event.to_dict())
    except UpstreamServiceError as e:
        logger.error(f"Tracking of {operation.short()} aborted: {e.message}")
        failure = StatusEvent.failed(operation.id, e.message)
        yield format_sse(operation.id, failure.to_dict(), event="error")


@router.get("/{transaction_hash}/track")
async def track_transaction(
    transaction_hash: str,
    req: Request,
    operation: Optional[str] = Query(
        None, description="Operation name for message presets"
    ),
):
    """
    Stream the lifecycle of one transaction as server-sent events.

    Raises 400 (via exception handler) for a malformed hash.
    """
    op = OperationRef(id=transaction_hash)
    messages = _build_messages(operation, {})
    return StreamingResponse(
        _stream_events(_get_tracker(req), op, messages),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post(
    "/wait",
    response_model=WaitForTransactionsResponse,
    status_code=status.HTTP_200_OK,
)
async def wait_for_transactions(
    request_data: WaitForTransactionsRequest,
    req: Request,
):
    """
    Wait until every transaction is indexed.

    Returns only after every member reached a terminal state.
    """
    overrides = request_data.messages.to_overrides() if request_data.messages else {}
    messages = _build_messages(request_data.operation, overrides)

    try:
        outcomes = await _get_tracker(req).track_all(
            request_data.transactionHashes, messages
        )
    except BatchTrackingError as e:
        results = []
        for operation_id, outcome in e.outcomes.items():
            if isinstance(outcome, StatusEvent):
                results.append(StatusEventResponse.from_event(outcome))
            else:
                results.append(
                    StatusEventResponse.from_event(
                        StatusEvent.failed(operation_id, str(outcome))
                    )
                )
        return WaitForTransactionsResponse(
            confirmed=False,
            failedTransactionHash=e.operation_id,
            reason=e.reason,
            results=results,
        )

    return WaitForTransactionsResponse(
        confirmed=True,
        results=[StatusEventResponse.from_event(event) for event in outcomes.values()],
    )
