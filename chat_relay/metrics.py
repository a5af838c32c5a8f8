from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    CONTENT_TYPE_LATEST,
    generate_latest,
)

registry = CollectorRegistry()

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
    registry=registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path", "status"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
    registry=registry,
)

# Upstream completion API calls, labelled by how the call ended:
# success, upstream_error, unavailable or error (any other exception)
upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total calls to the upstream completion API",
    ["outcome"],
    registry=registry,
)

upstream_request_duration_seconds = Histogram(
    "upstream_request_duration_seconds",
    "Upstream completion API latency in seconds",
    ["outcome"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60, 120),
    registry=registry,
)

__all__ = [
    "registry",
    "http_requests_total",
    "http_request_duration_seconds",
    "upstream_requests_total",
    "upstream_request_duration_seconds",
    "CONTENT_TYPE_LATEST",
    "generate_latest",
]
