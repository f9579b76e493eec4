"""Prometheus metrics for the Secret Spreader operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "secret_spreader_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "secret_spreader_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Replica operation metrics
replica_operations_total = Counter(
    "secret_spreader_replica_operations_total",
    "Total number of replica operations",
    ["operation", "result"],
)

# Payload drift detection metrics
drift_detected_total = Counter(
    "secret_spreader_drift_detected_total",
    "Total number of managed replicas found out of sync with their source",
    ["kind"],
)

foreign_conflicts_total = Counter(
    "secret_spreader_foreign_conflicts_total",
    "Total number of unmanaged secrets skipped in target namespaces",
)

# API call metrics
api_call_total = Counter(
    "secret_spreader_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "secret_spreader_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "secret_spreader_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)

# Error metrics
error_total = Counter(
    "secret_spreader_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)
