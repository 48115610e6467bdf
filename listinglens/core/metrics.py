from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# ---------------------------------------------------------------------------
# Resolution outcomes
# ---------------------------------------------------------------------------
resolutions_total = Counter(
    "listing_resolutions_total",
    "Total resolution calls by outcome",
    ["status"],
)
resolution_duration_seconds = Histogram(
    "listing_resolution_duration_seconds",
    "Wall-clock duration of one resolution call",
    buckets=[0.25, 0.5, 1, 2, 5, 10, 20, 30, 60],
)

# ---------------------------------------------------------------------------
# Per-strategy attempts
# ---------------------------------------------------------------------------
strategy_attempts_total = Counter(
    "listing_strategy_attempts_total",
    "Strategy attempts by strategy name and outcome",
    ["strategy", "status"],
)


def get_metrics() -> bytes:
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
