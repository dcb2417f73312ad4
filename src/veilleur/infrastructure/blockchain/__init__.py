"""
Blockchain service adapters (Portal and TheGraph over GraphQL).
"""

from veilleur.infrastructure.blockchain.graphql_transport import GraphQLTransport
from veilleur.infrastructure.blockchain.portal_receipt_client import (
    PortalReceiptClient,
)
from veilleur.infrastructure.blockchain.thegraph_watermark_client import (
    TheGraphWatermarkClient,
)

__all__ = [
    "GraphQLTransport",
    "PortalReceiptClient",
    "TheGraphWatermarkClient",
]
