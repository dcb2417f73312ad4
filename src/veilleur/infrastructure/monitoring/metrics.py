"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Gauge, Histogram

# ============================================================
# Upstream query metrics
# ============================================================

receipt_polls_total = Counter(
    "veilleur_receipt_polls_total",
    "Total receipt queries against the execution tier",
    ["outcome"],
)

watermark_polls_total = Counter(
    "veilleur_watermark_polls_total",
    "Total watermark queries against the index tier",
    ["covered"],
)

upstream_errors_total = Counter(
    "veilleur_upstream_errors_total",
    "Upstream queries that failed after transport retries",
    ["service"],
)

upstream_request_duration_seconds = Histogram(
    "veilleur_upstream_request_duration_seconds",
    "Upstream GraphQL request duration in seconds",
    ["service"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ============================================================
# Tracking metrics
# ============================================================

tracked_transactions_active = Gauge(
    "veilleur_tracked_transactions_active",
    "Transactions currently being tracked",
)

tracking_outcomes_total = Counter(
    "veilleur_tracking_outcomes_total",
    "Terminal lifecycle states reached",
    ["state"],
)

tracking_duration_seconds = Histogram(
    "veilleur_tracking_duration_seconds",
    "Time from tracking start to terminal state",
    ["state"],
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 180.0, 300.0),
)

batch_runs_total = Counter(
    "veilleur_batch_runs_total",
    "Batch durability waits by result",
    ["result"],
)
