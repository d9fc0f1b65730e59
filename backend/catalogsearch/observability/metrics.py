"""Prometheus metrics for catalog search.

Defines operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# AI provider calls
ai_calls_total = Counter(
    "catalogsearch_ai_calls_total",
    "Total AI API calls",
    ["call_type", "provider", "status"]  # status: success|error
)

ai_latency_ms = Histogram(
    "catalogsearch_ai_latency_ms",
    "AI API call latency in milliseconds",
    ["call_type", "provider"],
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000]
)

ai_tokens_total = Counter(
    "catalogsearch_ai_tokens_total",
    "Total AI tokens consumed",
    ["call_type", "provider"]
)

# Search pipeline
search_requests_total = Counter(
    "catalogsearch_search_requests_total",
    "Semantic search calls",
    ["status"]  # status: ok|empty|error
)

search_duration_seconds = Histogram(
    "catalogsearch_search_duration_seconds",
    "End-to-end semantic search latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

search_results_returned = Histogram(
    "catalogsearch_search_results_returned",
    "Number of results returned per successful search",
    buckets=[0, 1, 2, 5, 10, 20, 50]
)

# Ingestion
ingestion_total = Counter(
    "catalogsearch_ingestion_total",
    "Embedding ingestion calls",
    ["status"]  # status: success|failed
)

# Chat tools
tool_calls_total = Counter(
    "catalogsearch_tool_calls_total",
    "Tool invocations requested by the chat model",
    ["tool_name", "status"]  # status: success|error|unknown_tool
)

# HTTP
http_requests_total = Counter(
    "catalogsearch_http_requests_total",
    "HTTP requests by route template",
    ["method", "route", "status_code"]
)

http_request_duration_seconds = Histogram(
    "catalogsearch_http_request_duration_seconds",
    "HTTP request latency in seconds, until the response headers are sent",
    ["method", "route"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)
