"""Prometheus metrics for the Snowflake Account Operator."""

from prometheus_client import Counter, Gauge, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "snowflake_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "snowflake_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
)

error_total = Counter(
    "snowflake_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

# Snowflake account operation metrics
account_operations_total = Counter(
    "snowflake_operator_account_operations_total",
    "Total number of Snowflake account operations",
    ["operation", "result"],
)

account_operation_duration_seconds = Histogram(
    "snowflake_operator_account_operation_duration_seconds",
    "Duration of Snowflake account operations in seconds",
    ["operation"],
    buckets=[0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

# Kubernetes API call metrics
api_call_total = Counter(
    "snowflake_operator_api_call_total",
    "Total number of Kubernetes API calls",
    ["operation", "result"],
)

# Lease metrics
account_expirations_total = Counter(
    "snowflake_operator_account_expirations_total",
    "Total number of accounts whose duration expired",
)

requeue_after_seconds = Gauge(
    "snowflake_operator_requeue_after_seconds",
    "Most recently requested wake-up delay in seconds",
    ["kind"],
)
