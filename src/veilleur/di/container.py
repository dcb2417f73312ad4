"""
Dependency Injection Container for Veilleur.

Holds the process-wide upstream clients. Both are stateless apart from
their HTTP session pool and are shared by every tracking flow.
"""

from typing import Optional

from veilleur.application.transaction_tracker import TransactionTracker
from veilleur.config.settings import VeilleurConfig, get_settings
from veilleur.domain.services.i_execution_service import IExecutionService
from veilleur.domain.services.i_index_service import IIndexService
from veilleur.infrastructure.blockchain.portal_receipt_client import (
    PortalReceiptClient,
)
from veilleur.infrastructure.blockchain.thegraph_watermark_client import (
    TheGraphWatermarkClient,
)


class DIContainer:
    """
    Dependency Injection Container.

    Lazily builds singleton clients from settings. Tests inject fakes
    through the constructor instead.
    """

    def __init__(
        self,
        settings: Optional[VeilleurConfig] = None,
        execution_service: Optional[IExecutionService] = None,
        index_service: Optional[IIndexService] = None,
    ):
        """
        Initialize container.

        Args:
            settings: Settings (defaults to get_settings())
            execution_service: Pre-built receipt client
            index_service: Pre-built watermark client
        """
        self._settings = settings
        self._execution_service = execution_service
        self._index_service = index_service
        self._tracker: Optional[TransactionTracker] = None

    @property
    def settings(self) -> VeilleurConfig:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _transport_options(self) -> dict:
        resilience = self.settings.resilience
        return {
            "total_timeout": resilience.timeouts.total,
            "connect_timeout": resilience.timeouts.connect,
            "max_retries": resilience.retry.max_attempts,
            "initial_delay": resilience.retry.initial_delay,
            "max_delay": resilience.retry.max_delay,
        }

    @property
    def execution_service(self) -> IExecutionService:
        """Get Portal receipt client instance."""
        if self._execution_service is None:
            self._execution_service = PortalReceiptClient.from_url(
                self.settings.portal_url,
                access_token=self.settings.portal_access_token,
                **self._transport_options(),
            )
        return self._execution_service

    @property
    def index_service(self) -> IIndexService:
        """Get TheGraph watermark client instance."""
        if self._index_service is None:
            self._index_service = TheGraphWatermarkClient.from_url(
                self.settings.thegraph_url,
                access_token=self.settings.portal_access_token,
                **self._transport_options(),
            )
        return self._index_service

    @property
    def tracker(self) -> TransactionTracker:
        """Get transaction tracker instance."""
        if self._tracker is None:
            self._tracker = TransactionTracker(
                execution_service=self.execution_service,
                index_service=self.index_service,
                config=self.settings.tracking,
            )
        return self._tracker

    async def shutdown(self) -> None:
        """Close upstream HTTP sessions."""
        if self._execution_service:
            await self._execution_service.close()

        if self._index_service:
            await self._index_service.close()
