"""Pytest configuration and fixtures."""

import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def sqlite_store():
    """Create in-memory SQLite store for testing."""
    from trace_worker.storage import SqliteStore

    st = SqliteStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def mock_store():
    """Create mock analytical store speaking the ClickHouse dialect."""
    store = Mock()
    store.dialect = "clickhouse"
    store.query = AsyncMock(return_value=[])
    store.close = AsyncMock()
    return store


@pytest.fixture
def mock_client():
    """Create mock feature analysis client where every call succeeds."""
    client = Mock()
    client.notify_trace_concluded = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


@pytest.fixture
def tracker():
    """Create cycle tracker."""
    from trace_worker.tracker import CycleTracker

    return CycleTracker()


@pytest.fixture
def detector(mock_store):
    """Create ConclusionDetector over the mock store."""
    from trace_worker.conclusion import ConclusionDetector

    return ConclusionDetector(mock_store)


@pytest.fixture
def notifier(mock_client):
    """Create ConclusionNotifier over the mock client."""
    from trace_worker.conclusion import ConclusionNotifier

    return ConclusionNotifier(mock_client)


@pytest.fixture
def orchestrator(detector, notifier, tracker):
    """Create ConclusionOrchestrator wired to mocks."""
    from trace_worker.conclusion import ConclusionOrchestrator

    return ConclusionOrchestrator(detector, notifier, tracker)


@pytest.fixture
def worker_logs(caplog):
    """Capture DEBUG and above from the worker's loggers."""
    caplog.set_level(logging.DEBUG, logger="trace_worker")
    return caplog
