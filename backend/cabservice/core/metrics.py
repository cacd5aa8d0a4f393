"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Customer flow
availability_checks = Counter(
    'availability_checks_total',
    'Route availability checks',
    ['result']  # available, unavailable, error
)

booking_requests = Counter(
    'booking_requests_total',
    'Booking creation attempts',
    ['status']  # success, error
)

inquiry_requests = Counter(
    'inquiry_requests_total',
    'Inquiry creation attempts',
    ['status']  # success, error
)

request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Admin console
blocked_deletes = Counter(
    'admin_blocked_deletes_total',
    'Deletes refused because dependent rows exist',
    ['entity']  # city, cab_type
)

# Side effects
notifications = Counter(
    'admin_notifications_total',
    'Admin notification emails',
    ['result']  # sent, skipped, failed
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_availability(result: str):
    """Result: available, unavailable, error"""
    availability_checks.labels(result=result).inc()


def record_booking_request(status: str):
    booking_requests.labels(status=status).inc()


def record_inquiry_request(status: str):
    inquiry_requests.labels(status=status).inc()


def record_blocked_delete(entity: str):
    blocked_deletes.labels(entity=entity).inc()


def record_notification(result: str):
    notifications.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
