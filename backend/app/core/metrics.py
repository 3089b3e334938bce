"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Event write metrics
event_operations = Counter(
    'event_operations_total',
    'Event write operations',
    ['operation', 'status']  # create/update/delete, success/conflict/not_found/invalid
)

# Image host metrics
image_uploads = Counter(
    'image_uploads_total',
    'Image uploads to the object store',
    ['result']  # success, rejected, error
)

image_upload_latency = Histogram(
    'image_upload_latency_seconds',
    'Image upload latency',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, missing_event
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# Database metrics
db_connection_attempts = Counter(
    'db_connection_attempts_total',
    'Attempts to establish the database engine',
    ['result']  # success, error
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_event_operation(operation: str, status: str):
    """Record event write. Operation: create, update, delete"""
    event_operations.labels(operation=operation, status=status).inc()


def record_image_upload(result: str):
    image_uploads.labels(result=result).inc()


def record_booking_attempt(status: str):
    booking_attempts.labels(status=status).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


def record_db_connection(success: bool):
    db_connection_attempts.labels(result="success" if success else "error").inc()
