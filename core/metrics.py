"""
Prometheus metrics for the control plane.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Authentication metrics
auth_rejections_total = Counter(
    "auth_rejections_total",
    "Requests rejected by the authorization gates",
    ["reason"],
)

tokens_issued_total = Counter(
    "tokens_issued_total",
    "Access/refresh token pairs issued",
    ["flow"],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
    ["tier"],
)

license_validations_total = Counter(
    "license_validations_total",
    "License validation outcomes",
    ["outcome"],
)

licenses_revoked_total = Counter(
    "licenses_revoked_total",
    "Total licenses revoked",
    ["tier"],
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Licenses moved from active to expired",
)

activations_total = Counter(
    "activations_total",
    "Activation requests by outcome",
    ["outcome"],
)

# Telemetry metrics
telemetry_records_total = Counter(
    "telemetry_records_total",
    "Telemetry ingestion outcomes",
    ["outcome"],
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
    ["cache_key"],
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["cache_key"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
