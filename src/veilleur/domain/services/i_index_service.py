"""
Index service interface.
"""

from abc import ABC, abstractmethod

from veilleur.domain.entities.watermark import Watermark


class IIndexService(ABC):
    """
    Abstract interface for the index tier sync watermark.

    A single global value; safe to poll on a fixed interval.
    """

    @abstractmethod
    async def get_watermark(self) -> Watermark:
        """
        Fetch the latest fully indexed block.

        Returns:
            Watermark

        Raises:
            IndexServiceError: If the service cannot be queried
        """

    async def close(self) -> None:
        """Release transport resources (no-op by default)."""
