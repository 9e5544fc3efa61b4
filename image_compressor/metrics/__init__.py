"""
Metrics module for application monitoring.

This module provides Prometheus metrics collection and helper functions.
"""
from image_compressor.metrics.prometheus import (
    # API Metrics
    api_requests_total,
    api_request_duration_seconds,
    api_requests_in_progress,

    # Lifecycle Metrics
    lifecycle_records_enqueued_total,
    sweep_outcomes_total,
    sweep_duration_seconds,
    sweep_runs_total,

    # Compression Metrics
    compression_requests_total,
    compression_duration_seconds,
    compression_ratio,

    # Storage Metrics
    storage_operations_total,
    storage_operation_duration_seconds,

    # System Metrics
    app_info,
    app_uptime_seconds,

    # Helper Functions
    record_api_request,
    record_lifecycle_enqueue,
    record_sweep_outcome,
    record_sweep_run,
    record_compression,
    record_storage_operation,
)

__all__ = [
    "api_requests_total",
    "api_request_duration_seconds",
    "api_requests_in_progress",
    "lifecycle_records_enqueued_total",
    "sweep_outcomes_total",
    "sweep_duration_seconds",
    "sweep_runs_total",
    "compression_requests_total",
    "compression_duration_seconds",
    "compression_ratio",
    "storage_operations_total",
    "storage_operation_duration_seconds",
    "app_info",
    "app_uptime_seconds",
    "record_api_request",
    "record_lifecycle_enqueue",
    "record_sweep_outcome",
    "record_sweep_run",
    "record_compression",
    "record_storage_operation",
]
