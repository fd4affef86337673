"""Tests for Prometheus metrics middleware.

The prometheus-client registry is global and counters only go up, so
every assertion is on the delta around the action under test.
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from tests.conftest import REGISTER_BODY


def _get_sample(name: str, labels: dict | None = None) -> float:
    """Read a metric sample's current value from the global registry."""
    value = REGISTRY.get_sample_value(name, labels=labels or {})
    return value if value is not None else 0.0


def test_request_counter_increments(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    client.get("/health")
    after = _get_sample("http_requests_total", labels)
    assert after - before >= 1


def test_request_duration_histogram_observes(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health"}
    before = _get_sample("http_request_duration_seconds_count", labels)
    client.get("/health")
    after = _get_sample("http_request_duration_seconds_count", labels)
    assert after - before >= 1


def test_error_responses_are_counted_by_status(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/api/users/profile", "status_code": "401"}
    before = _get_sample("http_requests_total", labels)
    client.get("/api/users/profile")
    after = _get_sample("http_requests_total", labels)
    assert after - before >= 1


def test_auth_operations_counted_by_outcome(client: TestClient) -> None:
    ok = {"operation": "register", "outcome": "ok"}
    dup = {"operation": "register", "outcome": "duplicate_email"}
    ok_before = _get_sample("auth_operations_total", ok)
    dup_before = _get_sample("auth_operations_total", dup)

    client.post("/api/auth/register", json=REGISTER_BODY)
    client.post("/api/auth/register", json=REGISTER_BODY)

    assert _get_sample("auth_operations_total", ok) - ok_before == 1
    assert _get_sample("auth_operations_total", dup) - dup_before == 1


def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    client.get("/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert "http_request_duration_seconds" in resp.text
    assert "auth_operations_total" in resp.text


def test_metrics_endpoint_not_self_instrumented(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/metrics", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    client.get("/metrics")
    client.get("/metrics")
    after = _get_sample("http_requests_total", labels)
    assert after == before
