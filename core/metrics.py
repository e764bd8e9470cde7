"""
Prometheus metrics for the entitlement service.

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

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total license keys issued",
    ["package_tier", "license_mode"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total license keys activated",
    ["license_mode"],
)

licenses_upgraded_total = Counter(
    "licenses_upgraded_total",
    "Total license keys upgraded",
    ["package_tier", "license_mode"],
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Total license keys observed past their expiry",
)

# Feature entitlement metrics
feature_usage_total = Counter(
    "feature_usage_total",
    "Feature usage attempts by outcome",
    ["outcome"],
)

feature_violations_total = Counter(
    "feature_violations_total",
    "Feature quota violations recorded",
)

features_suspended_total = Counter(
    "features_suspended_total",
    "Features moved to the disabled list after repeated violations",
)

features_restored_total = Counter(
    "features_restored_total",
    "Disabled features restored",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
