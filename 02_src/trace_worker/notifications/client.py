"""Feature analysis API client."""

import asyncio
from typing import Protocol

import httpx

from ..logging_config import get_logger

logger = get_logger(__name__)

ANALYZE_PATH = "/api/features/analyze"


class NotificationError(RuntimeError):
    """Raised when the API did not accept a conclusion notification."""

    def __init__(self, trace_id: str, message: str):
        super().__init__(message)
        self.trace_id = trace_id


class IFeatureAnalysisClient(Protocol):
    """Tells the API that a trace has concluded."""

    async def notify_trace_concluded(self, trace_id: str) -> None:
        """Raise NotificationError unless the API accepted the trace."""
        ...

    async def close(self) -> None:
        """Release the HTTP connection pool."""
        ...


class FeatureAnalysisClient:
    """httpx client for ``POST <base>/api/features/analyze``."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}{ANALYZE_PATH}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=self._timeout,
                    transport=self._transport,
                )
        return self._client

    async def notify_trace_concluded(self, trace_id: str) -> None:
        """Notify the API; any non-2xx response or transport error is a failure."""
        client = await self._get_client()

        try:
            response = await client.post(self.endpoint, json={"trace_id": trace_id})
        except httpx.HTTPError as e:
            raise NotificationError(trace_id, f"Request failed: {e}") from e

        if not response.is_success:
            raise NotificationError(
                trace_id,
                f"API returned {response.status_code}: {response.text[:200]}",
            )

    async def close(self) -> None:
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
