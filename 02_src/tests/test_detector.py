"""Tests for ConclusionDetector."""

import logging

import pytest

from trace_worker.conclusion import QUERY_TAGS, ConclusionDetector
from trace_worker.storage import StoreQueryError


class TestDetectorFind:
    """Tests for ConclusionDetector.find()."""

    @pytest.mark.asyncio
    async def test_returns_trace_ids(self, detector, mock_store):
        """Test that find() maps rows to trace IDs."""
        mock_store.query.return_value = [
            {"trace_id": "trace-1"},
            {"trace_id": "trace-2"},
            {"trace_id": "trace-3"},
        ]

        result = await detector.find()

        assert result == ["trace-1", "trace-2", "trace-3"]

    @pytest.mark.asyncio
    async def test_issues_single_tagged_query(self, detector, mock_store):
        """Test that the query carries the marker param and tags."""
        await detector.find()

        mock_store.query.assert_awaited_once()
        call = mock_store.query.call_args
        assert "WHERE NOT has(mapKeys(t.metadata), {marker_key:String})" in call.args[0]
        assert call.kwargs["params"] == {"marker_key": "feature_id"}
        assert call.kwargs["tags"] == QUERY_TAGS

    @pytest.mark.asyncio
    async def test_returns_empty_when_nothing_found(self, detector, mock_store):
        mock_store.query.return_value = []
        assert await detector.find() == []

    @pytest.mark.asyncio
    async def test_query_error_returns_empty_and_logs(
        self, detector, mock_store, worker_logs
    ):
        """Test that a failing query is logged and reported as no candidates."""
        mock_store.query.side_effect = StoreQueryError("ClickHouse error")

        result = await detector.find()

        assert result == []
        errors = [r for r in worker_logs.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "Failed to query concluded traces" in errors[0].getMessage()
        assert "ClickHouse error" in errors[0].getMessage()

    @pytest.mark.asyncio
    async def test_malformed_rows_return_empty(self, detector, mock_store):
        """Test that rows without trace_id count as a failed query."""
        mock_store.query.return_value = [{"id": "trace-1"}]
        assert await detector.find() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [None, 42, ""])
    async def test_invalid_trace_id_returns_empty_and_logs(
        self, detector, mock_store, mock_client, worker_logs, bad_id
    ):
        """Test that a null or non-string trace_id is never passed on."""
        mock_store.query.return_value = [
            {"trace_id": "trace-1"},
            {"trace_id": bad_id},
        ]

        assert await detector.find() == []
        errors = [r for r in worker_logs.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "Malformed row" in errors[0].getMessage()
        mock_client.notify_trace_concluded.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deduplicates_preserving_order(self, detector, mock_store):
        mock_store.query.return_value = [
            {"trace_id": "b"},
            {"trace_id": "a"},
            {"trace_id": "b"},
        ]
        assert await detector.find() == ["b", "a"]

    @pytest.mark.asyncio
    async def test_truncates_to_batch_size(self, mock_store):
        """Test that the cap holds even if the store ignores LIMIT."""
        detector = ConclusionDetector(mock_store, batch_size=2)
        mock_store.query.return_value = [{"trace_id": f"t{i}"} for i in range(5)]

        assert await detector.find() == ["t0", "t1"]

    @pytest.mark.asyncio
    async def test_logs_found_count(self, detector, mock_store, worker_logs):
        mock_store.query.return_value = [{"trace_id": "trace-1"}]

        await detector.find()

        assert "Found 1 concluded traces ready for processing" in worker_logs.text


class TestDetectorQuery:
    """Tests for the query the detector issues."""

    def test_default_query_contains_threshold_and_cap(self, detector):
        assert "INTERVAL 60 SECOND" in detector.query
        assert "LIMIT 1000" in detector.query

    def test_configured_threshold_and_cap(self, mock_store):
        detector = ConclusionDetector(
            mock_store, threshold_seconds=90, batch_size=250, marker_key="done"
        )
        assert "INTERVAL 90 SECOND" in detector.query
        assert "LIMIT 250" in detector.query
        assert detector.marker_key == "done"

    def test_query_follows_store_dialect(self, mock_store):
        mock_store.dialect = "sqlite"
        detector = ConclusionDetector(mock_store)
        assert "datetime('now', '-60 seconds')" in detector.query
