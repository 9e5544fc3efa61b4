"""
Prometheus metrics for application monitoring.

This module defines all Prometheus metrics used throughout the application:
- API request metrics (requests, duration, in-progress)
- Lifecycle metrics (records enqueued, sweep outcomes, sweep duration)
- Compression metrics (requests, duration, compression ratio)
- Storage metrics (operations, duration)
"""
from prometheus_client import Counter, Gauge, Histogram


# ============================================================================
# API Metrics
# ============================================================================

api_requests_total = Counter(
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status"],
)

api_request_duration_seconds = Histogram(
    "api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

api_requests_in_progress = Gauge(
    "api_requests_in_progress",
    "Number of API requests currently being processed",
    ["method", "endpoint"],
)


# ============================================================================
# Lifecycle Metrics
# ============================================================================

lifecycle_records_enqueued_total = Counter(
    "lifecycle_records_enqueued_total",
    "Total number of lifecycle records written to the delay queue",
    ["status"],  # status: success, failed, skipped
)

sweep_outcomes_total = Counter(
    "sweep_outcomes_total",
    "Outcome of each lifecycle record processed by the retention sweep",
    ["outcome"],  # outcome: retired, deferred, failed, dropped
)

sweep_duration_seconds = Histogram(
    "sweep_duration_seconds",
    "Duration of one retention sweep tick",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30],
)

sweep_runs_total = Counter(
    "sweep_runs_total",
    "Total number of retention sweep ticks",
    ["status"],  # status: success, failed
)


# ============================================================================
# Compression Metrics
# ============================================================================

compression_requests_total = Counter(
    "compression_requests_total",
    "Total number of compression requests",
    ["status"],  # status: success, source_not_found, timeout, failed
)

compression_duration_seconds = Histogram(
    "compression_duration_seconds",
    "Duration of fetch-compress-store operations",
    buckets=[0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60, 120],
)

compression_ratio = Histogram(
    "compression_ratio",
    "Compression ratio achieved (input_size / output_size)",
    buckets=[0.5, 1.0, 1.5, 2.0, 3.0, 4.0, 5.0, 7.5, 10.0, 15.0, 20.0],
)


# ============================================================================
# Storage Metrics
# ============================================================================

storage_operations_total = Counter(
    "storage_operations_total",
    "Total number of storage operations",
    ["operation", "status"],  # operation: get, put, delete
)

storage_operation_duration_seconds = Histogram(
    "storage_operation_duration_seconds",
    "Duration of storage operations",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30, 60],
)


# ============================================================================
# System Metrics (Application Level)
# ============================================================================

app_info = Gauge(
    "app_info",
    "Application information",
    ["version", "environment"],
)

app_uptime_seconds = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)


# ============================================================================
# Helper Functions
# ============================================================================

def record_api_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record API request metrics."""
    api_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    api_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def record_lifecycle_enqueue(status: str):
    """Record a lifecycle record enqueue attempt."""
    lifecycle_records_enqueued_total.labels(status=status).inc()


def record_sweep_outcome(outcome: str):
    """Record the outcome of one swept record."""
    sweep_outcomes_total.labels(outcome=outcome).inc()


def record_sweep_run(success: bool, duration: float):
    """Record one sweep tick."""
    status = "success" if success else "failed"
    sweep_runs_total.labels(status=status).inc()
    sweep_duration_seconds.observe(duration)


def record_compression(status: str, duration: float, ratio: float = None):
    """Record compression request metrics."""
    compression_requests_total.labels(status=status).inc()
    compression_duration_seconds.observe(duration)
    if ratio is not None:
        compression_ratio.observe(ratio)


def record_storage_operation(operation: str, success: bool, duration: float):
    """Record storage operation metrics."""
    status = "success" if success else "failed"
    storage_operations_total.labels(operation=operation, status=status).inc()
    storage_operation_duration_seconds.labels(operation=operation).observe(duration)
