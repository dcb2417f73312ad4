"""
Domain service interfaces.
"""

from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.services.i_index_service import IIndexService

__all__ = ["IExecutionService", "IIndexService"]
