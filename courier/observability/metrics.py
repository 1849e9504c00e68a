"""Prometheus metrics for Courier.

Labels take values from fixed enums only; event names are caller-chosen
and stay out of label sets.
"""

from prometheus_client import Counter, Histogram

# Trigger metrics
TRIGGER_COUNT = Counter(
    "courier_trigger_count_total",
    "Total number of triggered events by terminal status",
    labelnames=["status"],
)

TARGETS_PER_TRIGGER = Histogram(
    "courier_targets_per_trigger",
    "Number of resolved subscribers per trigger",
    buckets=(0, 1, 2, 3, 5, 10, 20, 50, 100),
)

# Delivery metrics
DELIVERY_COUNT = Counter(
    "courier_delivery_count_total",
    "Total number of webhook delivery attempts by outcome",
    labelnames=["outcome"],
)

DELIVERY_LATENCY = Histogram(
    "courier_delivery_latency_seconds",
    "Webhook delivery latency in seconds",
    labelnames=["outcome"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Ledger metrics
LEDGER_WRITE_FAILURES = Counter(
    "courier_ledger_write_failures_total",
    "Delivery results or final event statuses that could not be written to the ledger",
)
