"""
Application use cases.
"""

from veilleur.application.use_cases.track_transaction import TrackTransaction
from veilleur.application.use_cases.track_transactions import TrackTransactions

__all__ = ["TrackTransaction", "TrackTransactions"]
