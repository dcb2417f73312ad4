"""
Portal receipt client.

Execution tier adapter: asks the Portal GraphQL API for a transaction
receipt and maps it onto the Receipt entity.
"""

from typing import Any, Dict, Optional

from veilleur.domain.entities.receipt import Receipt
from veilleur.domain.exceptions import ExecutionServiceError
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.infrastructure.blockchain.graphql_transport import GraphQLTransport

GET_TRANSACTION_QUERY = """
query GetTransaction($transactionHash: String!) {
  getTransaction(transactionHash: $transactionHash) {
    receipt {
      status
      revertReasonDecoded
      revertReason
      blockNumber
    }
  }
}
"""


def parse_block_number(value: Any) -> int:
    """
    Parse a block number reported as int, decimal string or hex string.

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid block number: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        number = int(text, 16) if text.lower().startswith("0x") else int(text)
    else:
        raise ValueError(f"Invalid block number: {value!r}")
    if number < 0:
        raise ValueError(f"Invalid block number: {value!r}")
    return number


class PortalReceiptClient(IExecutionService):
    """
    Portal GraphQL client for transaction receipts.

    A missing transaction maps to ``Receipt.not_found()``, a known
    transaction without receipt to ``Receipt.pending()``.
    """

    def __init__(
        self,
        transport: GraphQLTransport,
    ):
        """
        Initialize Portal receipt client.

        Args:
            transport: GraphQL transport bound to the Portal endpoint
        """
        self.transport = transport

    @classmethod
    def from_url(
        cls,
        portal_url: str,
        access_token: Optional[str] = None,
        **transport_options: Any,
    ) -> "PortalReceiptClient":
        """Build a client with its own transport."""
        headers = {"x-auth-token": access_token} if access_token else None
        transport = GraphQLTransport(
            endpoint=portal_url,
            service="portal",
            error_cls=ExecutionServiceError,
            headers=headers,
            **transport_options,
        )
        return cls(transport)

    async def get_receipt(self, operation: OperationRef) -> Receipt:
        """
        Fetch the current receipt for a transaction.

        Args:
            operation: Transaction to look up

        Returns:
            Receipt entity

        Raises:
            ExecutionServiceError: If the Portal cannot be queried or
                returns an unexpected shape
        """
        data = await self.transport.execute(
            GET_TRANSACTION_QUERY,
            {"transactionHash": operation.id},
        )
        return self._parse_receipt(operation, data)

    def _parse_receipt(
        self, operation: OperationRef, data: Dict[str, Any]
    ) -> Receipt:
        """
        Map a GetTransaction response onto a Receipt.

        Args:
            operation: Transaction that was queried
            data: GraphQL ``data`` object

        Returns:
            Receipt entity

        Raises:
            ExecutionServiceError: If the receipt is malformed
        """
        transaction = data.get("getTransaction")
        if not transaction:
            return Receipt.not_found()
        if not isinstance(transaction, dict):
            raise ExecutionServiceError(
                f"Malformed transaction for {operation.id}: {transaction!r}",
                details={"transaction_hash": operation.id},
            )

        receipt = transaction.get("receipt")
        if not receipt:
            return Receipt.pending()
        if not isinstance(receipt, dict):
            raise ExecutionServiceError(
                f"Malformed receipt for {operation.id}: {receipt!r}",
                details={"transaction_hash": operation.id},
            )

        status = receipt.get("status")
        try:
            block_number = parse_block_number(receipt.get("blockNumber"))
        except ValueError as e:
            raise ExecutionServiceError(
                f"Malformed receipt for {operation.id}: {e}",
                details={"transaction_hash": operation.id, "receipt": receipt},
            ) from e

        if status == "Success":
            return Receipt.success(block_number)

        if status == "Reverted":
            # Prefer the human-readable reason, then the raw revert bytes
            reason = receipt.get("revertReasonDecoded")
            if reason is None:
                reason = receipt.get("revertReason")
            return Receipt.reverted(block_number, reason or "")

        raise ExecutionServiceError(
            f"Unknown receipt status for {operation.id}: {status!r}",
            details={"transaction_hash": operation.id, "status": status},
        )

    async def close(self) -> None:
        await self.transport.close()
