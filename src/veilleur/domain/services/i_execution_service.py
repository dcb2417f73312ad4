"""
Execution service interface.

The execution tier answers one question: what is the receipt of this
transaction right now?
"""

from abc import ABC, abstractmethod

from veilleur.domain.entities.receipt import Receipt
from veilleur.domain.value_objects.operation_ref import OperationRef


class IExecutionService(ABC):
    """
    Abstract interface for transaction receipt queries.

    Implementations must be safe to call repeatedly and concurrently
    from independent tracking flows.
    """

    @abstractmethod
    async def get_receipt(self, operation: OperationRef) -> Receipt:
        """
        Fetch the current receipt for a transaction.

        Args:
            operation: Transaction to look up

        Returns:
            Receipt; not-found or pending while still outstanding

        Raises:
            ExecutionServiceError: If the service cannot be queried
        """

    async def close(self) -> None:
        """Release transport resources (no-op by default)."""
