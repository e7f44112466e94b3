"""Analytical store interface."""

from typing import Any, Literal, Protocol

Dialect = Literal["clickhouse", "sqlite"]


class StoreQueryError(RuntimeError):
    """Raised when the analytical store cannot answer a query."""


class IAnalyticsStore(Protocol):
    """Read-only query access to the trace/observation tables."""

    dialect: Dialect

    async def query(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
        tags: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a parameterized query and return rows as dicts."""
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        ...
