"""
Prometheus instrumentation.
Exposed at /metrics by the application.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total ticket purchase attempts',
    ['status']  # success, overbooked, invalid, not_found, unavailable
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Ticket purchase latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

tickets_sold = Counter(
    'tickets_sold_total',
    'Tickets sold across all showtimes'
)

# Catalog metrics
catalog_reads = Counter(
    'catalog_reads_total',
    'Catalog listings served',
    ['source']  # store, cache, fallback
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# HTTP metrics
request_latency = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency',
    ['method', 'status_code'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def metrics_endpoint() -> Response:
    """Render the default registry in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record purchase attempt. Status: success, overbooked, invalid, not_found, unavailable"""
    booking_attempts.labels(status=status).inc()


def record_catalog_read(source: str):
    catalog_reads.labels(source=source).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
