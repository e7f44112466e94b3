"""Storage module."""

from .clickhouse import ClickHouseStore
from .sqlite import SqliteStore
from .store import Dialect, IAnalyticsStore, StoreQueryError

__all__ = [
    "ClickHouseStore",
    "Dialect",
    "IAnalyticsStore",
    "SqliteStore",
    "StoreQueryError",
]
