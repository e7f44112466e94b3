"""Integration tests for the detection -> notification flow."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from trace_worker.app import Application
from trace_worker.config import WorkerConfig
from trace_worker.models import Observation, Trace
from trace_worker.notifications import FeatureAnalysisClient
from trace_worker.storage import SqliteStore


def _ago(seconds: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(seconds=seconds)


@pytest.fixture
async def store(tmp_path):
    """Create a file-backed store with one silent and one active trace."""
    st = SqliteStore(str(tmp_path / "traces.db"))
    await st.init()

    await st.save_trace(Trace(id="silent", timestamp=_ago(600)))
    await st.save_observation(
        Observation(id="o1", trace_id="silent", updated_at=_ago(300))
    )
    await st.save_trace(Trace(id="active", timestamp=_ago(600)))
    await st.save_observation(
        Observation(id="o2", trace_id="active", updated_at=_ago(1))
    )

    yield st
    await st.close()


def _analysis_api(store, calls, fail_ids=()):
    """Mock API: marks the trace processed; repeated calls are no-ops."""

    async def handler(request: httpx.Request) -> httpx.Response:
        trace_id = json.loads(request.content)["trace_id"]
        calls.append(trace_id)
        if trace_id in fail_ids:
            return httpx.Response(500, text="analysis failed")
        await store.mark_processed(trace_id, "feature_id", f"feature-{trace_id}")
        return httpx.Response(200, json={"trace_id": trace_id})

    return FeatureAnalysisClient(
        base_url="http://api:3000", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_full_flow(store):
    """Test that a silent trace is notified once and then no longer found."""
    calls = []
    client = _analysis_api(store, calls)
    app = Application(
        WorkerConfig(backend="sqlite", enabled=False), store=store, client=client
    )
    await app.start()

    assert await app.orchestrator.run_cycle() == 1
    assert calls == ["silent"]

    trace = await store.get_trace("silent")
    assert trace.metadata == {"feature_id": "feature-silent"}

    # Marked traces are not detected again
    assert await app.orchestrator.run_cycle() == 0
    assert calls == ["silent"]

    await app.stop()
    await client.close()


@pytest.mark.asyncio
async def test_failed_notification_retried_next_cycle(store):
    """Test that an unmarked trace is picked up again on the following cycle."""
    calls = []
    client = _analysis_api(store, calls, fail_ids={"silent"})
    app = Application(
        WorkerConfig(backend="sqlite", enabled=False), store=store, client=client
    )
    await app.start()

    assert await app.orchestrator.run_cycle() == 0
    assert await app.orchestrator.run_cycle() == 0
    assert calls == ["silent", "silent"]

    outcomes = app.tracker.recent()
    assert [o.failed for o in outcomes] == [1, 1]

    await app.stop()
    await client.close()


@pytest.mark.asyncio
async def test_scheduler_drives_cycles(store):
    """Test the scheduled loop end to end."""
    calls = []
    client = _analysis_api(store, calls)
    app = Application(
        WorkerConfig(backend="sqlite", interval_ms=10), store=store, client=client
    )
    await app.start()

    loop = asyncio.get_running_loop()
    deadline = loop.time() + 2.0
    while len(app.tracker) < 3 and loop.time() < deadline:
        await asyncio.sleep(0.01)
    await app.stop()

    assert len(app.tracker) >= 3
    assert calls == ["silent"]


@pytest.mark.asyncio
async def test_concurrent_workers_tolerate_duplicates(store):
    """Test that two workers may both notify the same trace without error."""
    calls = []
    client = _analysis_api(store, calls)
    config = WorkerConfig(backend="sqlite", enabled=False)
    first = Application(config, store=store, client=client)
    second = Application(config, store=store, client=client)
    await first.start()
    await second.start()

    # Both detect before either notifies
    found_first = await first._detector.find()
    found_second = await second._detector.find()
    assert found_first == found_second == ["silent"]

    assert await first._notifier.process(found_first) == 1
    assert await second._notifier.process(found_second) == 1
    assert calls == ["silent", "silent"]

    trace = await store.get_trace("silent")
    assert trace.metadata == {"feature_id": "feature-silent"}

    await first.stop()
    await second.stop()
    await client.close()
