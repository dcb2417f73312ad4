"""
TheGraph watermark client.

Index tier adapter: reads the subgraph ``_meta`` block number.
"""

from typing import Any, Optional

from veilleur.domain.entities.watermark import Watermark
from veilleur.domain.exceptions import IndexServiceError
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.infrastructure.blockchain.graphql_transport import GraphQLTransport
from veilleur.infrastructure.blockchain.portal_receipt_client import (
    parse_block_number,
)

GET_INDEXING_STATUS_QUERY = """
query GetIndexingStatus {
  _meta {
    block {
      number
    }
  }
}
"""


class TheGraphWatermarkClient(IIndexService):
    """
    TheGraph client for the subgraph sync watermark.

    A subgraph that has not reported ``_meta`` yet counts as block 0.
    """

    def __init__(self, transport: GraphQLTransport):
        self.transport = transport

    @classmethod
    def from_url(
        cls,
        thegraph_url: str,
        access_token: Optional[str] = None,
        **transport_options: Any,
    ) -> "TheGraphWatermarkClient":
        """Build a client with its own transport."""
        headers = {"x-auth-token": access_token} if access_token else None
        transport = GraphQLTransport(
            endpoint=thegraph_url,
            service="thegraph",
            error_cls=IndexServiceError,
            headers=headers,
            **transport_options,
        )
        return cls(transport)

    async def get_watermark(self) -> Watermark:
        """
        Fetch the latest indexed block.

        Returns:
            Watermark

        Raises:
            IndexServiceError: If TheGraph cannot be queried or the block
                number is malformed
        """
        data = await self.transport.execute(GET_INDEXING_STATUS_QUERY)

        meta = data.get("_meta")
        if not meta:
            return Watermark(indexed_block=0)

        block = meta.get("block") if isinstance(meta, dict) else None
        if not isinstance(block, dict):
            raise IndexServiceError(
                f"Malformed indexing status: {meta!r}",
                details={"meta": meta},
            )

        try:
            number = parse_block_number(block.get("number"))
        except ValueError as e:
            raise IndexServiceError(
                f"Malformed indexing status: {e}",
                details={"meta": meta},
            ) from e

        return Watermark(indexed_block=number)

    async def close(self) -> None:
        await self.transport.close()
