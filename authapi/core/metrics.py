"""Prometheus metric inventory.

All metrics are declared here and incremented where the behavior lives:
HTTP metrics by MetricsMiddleware, auth outcomes by AuthService.

Counters only go up; tests assert on deltas against the global REGISTRY.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Register and login are dominated by password hashing (~50-300ms),
    # so the upper buckets matter more here than for a typical CRUD API.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Auth metrics (populated by AuthService)
# ---------------------------------------------------------------------------

AUTH_OPERATIONS = Counter(
    "auth_operations_total",
    "Auth service operations by outcome",
    ["operation", "outcome"],  # operation: register|login|get_user; outcome: error kind or "ok"
)
