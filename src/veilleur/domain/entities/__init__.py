"""
Domain entities.
"""

from veilleur.domain.entities.lifecycle import (
    TERMINAL_STATES,
    Lifecycle,
    LifecycleState,
)
from veilleur.domain.entities.receipt import Receipt, ReceiptOutcome
from veilleur.domain.entities.status_event import EventPhase, StatusEvent
from veilleur.domain.entities.watermark import Watermark

__all__ = [
    "Lifecycle",
    "LifecycleState",
    "TERMINAL_STATES",
    "Receipt",
    "ReceiptOutcome",
    "StatusEvent",
    "EventPhase",
    "Watermark",
]
