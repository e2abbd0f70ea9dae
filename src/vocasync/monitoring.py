"""Prometheus metrics for the sync service."""
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest

# Push metrics
sync_pushes = Counter(
    "vocasync_sync_pushes_total",
    "Total number of push requests handled",
)

items_received = Counter(
    "vocasync_sync_items_received_total",
    "Total number of progress items received in pushes",
)

items_dropped = Counter(
    "vocasync_sync_items_dropped_total",
    "Total number of pushed progress items that were not written",
    ["reason"],  # unknown_word, stale
)

items_written = Counter(
    "vocasync_sync_items_written_total",
    "Total number of progress rows written by pushes",
    ["action"],  # create, update
)

push_duration = Histogram(
    "vocasync_sync_push_duration_seconds",
    "Duration of push requests in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Pull metrics
sync_pulls = Counter(
    "vocasync_sync_pulls_total",
    "Total number of pull requests handled",
    ["mode"],  # full, incremental
)

rows_exported = Counter(
    "vocasync_sync_rows_exported_total",
    "Total number of progress rows returned by pulls",
)

# Database metrics
db_errors = Counter(
    "vocasync_db_errors_total",
    "Total number of database errors",
    ["error_type"],
)


def render_metrics() -> tuple[bytes, str]:
    """Render the default registry in Prometheus text format."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
