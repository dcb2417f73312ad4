"""
API routes.
"""

from veilleur.presentation.api.routes.health import router as health_router
from veilleur.presentation.api.routes.transactions import (
    router as transactions_router,
)

__all__ = ["health_router", "transactions_router"]
