"""
Clock abstraction.

The tracker's only suspension points besides network calls are the two
polling sleeps; routing them through a Clock lets tests compress time.
"""

import asyncio
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Monotonic time source plus cooperative sleep."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic seconds."""

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the current flow."""


class SystemClock(Clock):
    """Event-loop backed clock used in production."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))
