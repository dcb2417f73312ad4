"""
Lifecycle entity - tracker state for one OperationRef.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from veilleur.domain.exceptions import InvalidTransitionError


class LifecycleState(str, Enum):
    """Lifecycle states of a tracked transaction."""

    SUBMITTED = "submitted"
    MINING = "mining"
    MINING_FAILED = "mining_failed"
    MINING_DROPPED = "mining_dropped"
    MINED = "mined"
    INDEXING_PENDING = "indexing_pending"
    INDEXING_TIMED_OUT = "indexing_timed_out"
    CONFIRMED = "confirmed"
    # Overall stream budget exhausted before another terminal state
    STREAM_TIMED_OUT = "stream_timed_out"


_TRANSITIONS: Dict[LifecycleState, FrozenSet[LifecycleState]] = {
    LifecycleState.SUBMITTED: frozenset({LifecycleState.MINING}),
    LifecycleState.MINING: frozenset(
        {
            LifecycleState.MINING_FAILED,
            LifecycleState.MINING_DROPPED,
            LifecycleState.MINED,
            LifecycleState.STREAM_TIMED_OUT,
        }
    ),
    LifecycleState.MINED: frozenset({LifecycleState.INDEXING_PENDING}),
    LifecycleState.INDEXING_PENDING: frozenset(
        {
            LifecycleState.INDEXING_TIMED_OUT,
            LifecycleState.CONFIRMED,
            LifecycleState.STREAM_TIMED_OUT,
        }
    ),
}

TERMINAL_STATES: FrozenSet[LifecycleState] = frozenset(
    {
        LifecycleState.MINING_FAILED,
        LifecycleState.MINING_DROPPED,
        LifecycleState.INDEXING_TIMED_OUT,
        LifecycleState.CONFIRMED,
        LifecycleState.STREAM_TIMED_OUT,
    }
)


@dataclass
class Lifecycle:
    """
    State machine for one tracked transaction.

    Business rules:
    - SUBMITTED → MINING → {MINING_FAILED | MINING_DROPPED | MINED}
    - MINED → INDEXING_PENDING → {INDEXING_TIMED_OUT | CONFIRMED}
    - No state is revisited; terminal states accept no transition
    - Owned by exactly one tracking flow, never shared
    """

    operation_id: str
    max_attempts: int
    state: LifecycleState = field(default=LifecycleState.SUBMITTED)
    attempts: int = field(default=0)
    block_number: Optional[int] = field(default=None)
    revert_reason: Optional[str] = field(default=None)
    indexing_deadline: Optional[float] = field(default=None)

    def _move(self, target: LifecycleState) -> None:
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if target not in allowed:
            raise InvalidTransitionError(self.state.value, target.value)
        self.state = target

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def start_mining(self) -> None:
        """Enter the receipt polling phase."""
        self._move(LifecycleState.MINING)

    def record_attempt(self) -> None:
        """
        Count one receipt query.

        Raises:
            InvalidTransitionError: If not MINING or budget already spent
        """
        if self.state != LifecycleState.MINING:
            raise InvalidTransitionError(self.state.value, "attempt")
        if self.attempts_exhausted:
            raise InvalidTransitionError(self.state.value, "attempt")
        self.attempts += 1

    @property
    def attempts_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def fail_mining(self, revert_reason: str) -> None:
        self._move(LifecycleState.MINING_FAILED)
        self.revert_reason = revert_reason

    def drop(self) -> None:
        self._move(LifecycleState.MINING_DROPPED)

    def mark_mined(self, block_number: int) -> None:
        self._move(LifecycleState.MINED)
        self.block_number = block_number

    def begin_indexing(self, deadline: float) -> None:
        self._move(LifecycleState.INDEXING_PENDING)
        self.indexing_deadline = deadline

    def time_out_indexing(self) -> None:
        self._move(LifecycleState.INDEXING_TIMED_OUT)

    def confirm(self) -> None:
        self._move(LifecycleState.CONFIRMED)

    def time_out_stream(self) -> None:
        self._move(LifecycleState.STREAM_TIMED_OUT)
