"""
GraphQL transport over aiohttp.

Shared by the Portal (execution tier) and TheGraph (index tier) clients.
One long-lived session per endpoint; safe to share across concurrent
tracking flows since no per-request state is kept on the instance.
"""

import asyncio
import time
from typing import Any, Dict, Optional, Type

import aiohttp
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from veilleur.domain.exceptions import UpstreamServiceError
from veilleur.infrastructure.monitoring import get_logger
from veilleur.infrastructure.monitoring.metrics import (
    upstream_errors_total,
    upstream_request_duration_seconds,
)

logger = get_logger(__name__)

TRANSIENT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class GraphQLTransport:
    """
    Minimal GraphQL-over-HTTP client with retries.

    Transport failures (connection errors, timeouts, HTTP 5xx) are retried
    with exponential backoff; once retries are exhausted they surface as
    ``error_cls``. GraphQL-level errors are not retried.
    """

    def __init__(
        self,
        endpoint: str,
        service: str,
        error_cls: Type[UpstreamServiceError] = UpstreamServiceError,
        headers: Optional[Dict[str, str]] = None,
        total_timeout: float = 10.0,
        connect_timeout: float = 3.0,
        max_retries: int = 3,
        initial_delay: float = 0.5,
        max_delay: float = 4.0,
    ):
        """
        Initialize GraphQL transport.

        Args:
            endpoint: GraphQL endpoint URL
            service: Service name for logs and metrics
            error_cls: Exception raised when the service cannot answer
            headers: Extra request headers (auth tokens)
            total_timeout: Total request timeout in seconds
            connect_timeout: Connection timeout in seconds
            max_retries: Attempts per query, including the first
            initial_delay: First backoff delay in seconds
            max_delay: Backoff cap in seconds
        """
        self.endpoint = endpoint.rstrip("/")
        self.service = service
        self.error_cls = error_cls
        self.headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(
            total=total_timeout,
            connect=connect_timeout,
        )
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                connector=aiohttp.TCPConnector(
                    limit=100,
                    limit_per_host=50,
                    ttl_dns_cache=300,
                ),
            )
        return self._session

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Run a GraphQL query.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The ``data`` object of the response

        Raises:
            UpstreamServiceError: (as ``error_cls``) on transport failure
                after retries, or on GraphQL errors
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(
                    multiplier=self.initial_delay,
                    min=self.initial_delay,
                    max=self.max_delay,
                ),
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    return await self._execute_once(query, variables)
        except TRANSIENT_ERRORS as e:
            upstream_errors_total.labels(service=self.service).inc()
            logger.error(
                f"{self.service} unreachable after {self.max_retries} attempts: "
                f"{type(e).__name__}: {e}"
            )
            raise self.error_cls(
                f"{self.service} request failed: {type(e).__name__}",
                details={"endpoint": self.endpoint, "error": str(e)},
            ) from e

    async def _execute_once(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Single HTTP round trip (called by retry logic)."""
        session = await self._get_session()
        payload = {"query": query, "variables": variables or {}}

        start = time.monotonic()
        try:
            async with session.post(
                self.endpoint,
                json=payload,
                headers=self.headers,
            ) as response:
                if response.status >= 500:
                    # Let retry logic handle server-side failures
                    response.raise_for_status()
                if response.status >= 400:
                    upstream_errors_total.labels(service=self.service).inc()
                    raise self.error_cls(
                        f"{self.service} rejected query: HTTP {response.status}",
                        details={"endpoint": self.endpoint, "status": response.status},
                    )
                try:
                    data = await response.json(content_type=None)
                except (ValueError, aiohttp.ContentTypeError) as e:
                    upstream_errors_total.labels(service=self.service).inc()
                    raise self.error_cls(
                        f"{self.service} returned invalid JSON",
                        details={"endpoint": self.endpoint, "error": str(e)},
                    ) from e
        finally:
            upstream_request_duration_seconds.labels(service=self.service).observe(
                time.monotonic() - start
            )

        if not isinstance(data, dict):
            raise self.error_cls(
                f"{self.service} returned a non-object response",
                details={"endpoint": self.endpoint},
            )

        if data.get("errors"):
            upstream_errors_total.labels(service=self.service).inc()
            raise self.error_cls(
                f"{self.service} GraphQL error: {data['errors']}",
                details={"endpoint": self.endpoint, "errors": data["errors"]},
            )

        result = data.get("data") or {}
        if not isinstance(result, dict):
            raise self.error_cls(
                f"{self.service} returned a non-object data field",
                details={"endpoint": self.endpoint},
            )
        return result

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
