"""Prometheus metrics for backend calls, sessions, list views and decisions"""

from prometheus_client import Counter, Histogram

# Backend calls
backend_request_counter = Counter(
    "console_backend_requests_total",
    "Calls made to backend services",
    ["service", "outcome"],  # ok | unauthorized | not_found | server_error | network_error | timeout
)

backend_latency_histogram = Histogram(
    "console_backend_latency_seconds",
    "Backend service response time",
    ["service"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Sessions
login_counter = Counter(
    "console_logins_total",
    "Login attempts",
    ["outcome"],  # success | failure
)

forced_logout_counter = Counter(
    "console_forced_logouts_total",
    "Sessions torn down after a 401/403 from a backend",
)

# List views
list_fetch_failures_counter = Counter(
    "console_list_fetch_failures_total",
    "Failed list view fetches",
    ["view"],
)

# Decisions
decision_counter = Counter(
    "console_decisions_total",
    "Underwriting decisions submitted",
    ["kind", "outcome"],  # accepted | rejected_locally | failed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_decision(kind: str, outcome: str) -> None:
    """Record a decision attempt"""
    decision_counter.labels(kind=kind, outcome=outcome).inc()
