"""Observability module for catalog search.

Provides structured logging, metrics, and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    ai_calls_total,
    ai_latency_ms,
    ai_tokens_total,
    search_requests_total,
    search_duration_seconds,
    search_results_returned,
    ingestion_total,
    tool_calls_total,
    http_requests_total,
    http_request_duration_seconds,
)
from .request_id import request_id_var, get_request_id, set_request_id, generate_request_id
from .health import HealthStatus, ComponentHealth, HealthReport
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "ai_calls_total",
    "ai_latency_ms",
    "ai_tokens_total",
    "search_requests_total",
    "search_duration_seconds",
    "search_results_returned",
    "ingestion_total",
    "tool_calls_total",
    "http_requests_total",
    "http_request_duration_seconds",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    "HealthReport",
    # Middleware
    "RequestIDMiddleware",
]
