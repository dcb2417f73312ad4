"""
Tracking building blocks: clock, mining poller, indexing waiter.
"""

from veilleur.application.services.clock import Clock, SystemClock
from veilleur.application.services.receipt_poller import Mined, ReceiptPoller
from veilleur.application.services.watermark_waiter import WatermarkWaiter

__all__ = [
    "Clock",
    "SystemClock",
    "Mined",
    "ReceiptPoller",
    "WatermarkWaiter",
]
