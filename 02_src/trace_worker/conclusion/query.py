"""Conclusion query text for each store dialect.

A trace is concluded when the newest ``updated_at`` across its observations
and the trace's own timestamp are both older than the inactivity threshold,
and its metadata does not carry the processed marker key. Threshold and limit
are inlined as validated integers; the marker key is a bound parameter.
"""

from ..storage import Dialect

MARKER_PARAM = "marker_key"

QUERY_TAGS = {
    "feature": "trace-conclusion",
    "type": "query",
    "kind": "find-concluded",
}

_CLICKHOUSE_TEMPLATE = """
WITH trace_latest_updates AS (
    SELECT
        trace_id,
        max(updated_at) AS last_updated
    FROM observations FINAL
    GROUP BY trace_id
    HAVING last_updated < now() - INTERVAL {threshold} SECOND
)
SELECT DISTINCT
    t.id AS trace_id
FROM traces AS t FINAL
INNER JOIN trace_latest_updates AS tlu ON t.id = tlu.trace_id
WHERE NOT has(mapKeys(t.metadata), {{marker_key:String}})
AND t.timestamp < now() - INTERVAL {threshold} SECOND
LIMIT {limit}
"""

_SQLITE_TEMPLATE = """
WITH trace_latest_updates AS (
    SELECT
        trace_id,
        max(updated_at) AS last_updated
    FROM observations
    GROUP BY trace_id
    HAVING max(updated_at) < datetime('now', '-{threshold} seconds')
)
SELECT DISTINCT
    t.id AS trace_id
FROM traces AS t
INNER JOIN trace_latest_updates AS tlu ON t.id = tlu.trace_id
WHERE NOT EXISTS (
    SELECT 1 FROM json_each(t.metadata) WHERE json_each.key = :marker_key
)
AND t.timestamp < datetime('now', '-{threshold} seconds')
LIMIT {limit}
"""

_TEMPLATES: dict[str, str] = {
    "clickhouse": _CLICKHOUSE_TEMPLATE,
    "sqlite": _SQLITE_TEMPLATE,
}


def build_conclusion_query(
    dialect: Dialect, threshold_seconds: int, limit: int
) -> str:
    """Return the conclusion query for ``dialect``."""
    if isinstance(threshold_seconds, bool) or not isinstance(threshold_seconds, int):
        raise TypeError("threshold_seconds must be an int")
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise TypeError("limit must be an int")
    if threshold_seconds <= 0:
        raise ValueError("threshold_seconds must be positive")
    if limit <= 0:
        raise ValueError("limit must be positive")

    try:
        template = _TEMPLATES[dialect]
    except KeyError:
        raise ValueError(f"Unsupported dialect: {dialect!r}") from None

    return template.format(threshold=threshold_seconds, limit=limit)
