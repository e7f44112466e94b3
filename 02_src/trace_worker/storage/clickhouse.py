"""ClickHouse store over the HTTP interface."""

import asyncio
import json
from typing import Any

import httpx

from ..logging_config import get_logger
from .store import Dialect, StoreQueryError

logger = get_logger(__name__)


class ClickHouseStore:
    """Runs queries against ClickHouse's HTTP interface.

    The underlying ``httpx.AsyncClient`` is created on first use and shared by
    every query issued through this store until ``close()`` is called.
    """

    dialect: Dialect = "clickhouse"

    def __init__(
        self,
        url: str = "http://localhost:8123",
        user: str = "default",
        password: str = "",
        database: str = "default",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url.rstrip("/") + "/"
        self._user = user
        self._password = password
        self._database = database
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=self._timeout,
                    transport=self._transport,
                    headers={
                        "X-ClickHouse-User": self._user,
                        "X-ClickHouse-Key": self._password,
                    },
                )
                logger.debug("ClickHouse client created for %s", self._url)
        return self._client

    async def query(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
        tags: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a query with ``{name:Type}`` placeholders bound from params."""
        client = await self._get_client()

        request_params: dict[str, str] = {"database": self._database}
        for name, value in (params or {}).items():
            request_params[f"param_{name}"] = str(value)
        if tags:
            request_params["log_comment"] = json.dumps(tags, sort_keys=True)

        body = sql.strip().rstrip(";") + "\nFORMAT JSONEachRow"

        try:
            response = await client.post(
                self._url,
                params=request_params,
                content=body.encode("utf-8"),
            )
        except httpx.HTTPError as e:
            raise StoreQueryError(f"ClickHouse request failed: {e}") from e

        if response.status_code != 200:
            raise StoreQueryError(
                f"ClickHouse returned {response.status_code}: {response.text[:500]}"
            )

        rows: list[dict[str, Any]] = []
        for line in response.text.splitlines():
            if not line.strip():
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError as e:
                raise StoreQueryError(f"Malformed ClickHouse row: {line[:200]}") from e
            if not isinstance(row, dict):
                raise StoreQueryError(f"Unexpected ClickHouse row: {line[:200]}")
            rows.append(row)
        return rows

    async def close(self) -> None:
        """Close the shared HTTP client."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
