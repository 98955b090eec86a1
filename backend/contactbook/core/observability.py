"""
Observability utilities for monitoring and metrics.

Provides:
- Prometheus metrics export
- Request tracking
- Contact book domain counters
"""

import time
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST

logger = logging.getLogger(__name__)

# Prometheus metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'Number of HTTP requests in progress',
    ['method']  # route is not resolved until the request is dispatched
)

contact_mutations_total = Counter(
    'contact_mutations_total',
    'Successful contact writes',
    ['operation']  # create, update or delete
)

notes_created_total = Counter(
    'notes_created_total',
    'Notes appended to contacts'
)

preference_writes_total = Counter(
    'preference_writes_total',
    'Preference documents replaced'
)


def _endpoint_label(request: Request) -> str:
    """Route template when matched, so ids do not explode label cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics.

    Tracks:
    - Request count by method, endpoint, status
    - Request duration
    - Requests in progress
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics for /metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = request.url.path

        http_requests_in_progress.labels(method=method).inc()
        start_time = time.time()

        try:
            response = await call_next(request)
            status = response.status_code
        except Exception as e:
            http_requests_total.labels(
                method=method,
                endpoint=_endpoint_label(request),
                status=500
            ).inc()
            logger.error(f"Request failed: {method} {path}: {e}")
            raise
        finally:
            http_requests_in_progress.labels(method=method).dec()
            duration = time.time() - start_time
            http_request_duration_seconds.labels(
                method=method,
                endpoint=_endpoint_label(request)
            ).observe(duration)

        http_requests_total.labels(
            method=method,
            endpoint=_endpoint_label(request),
            status=status
        ).inc()

        return response


async def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus exposition format.
    """
    metrics = generate_latest()
    return Response(content=metrics, media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app) -> None:
    """
    Configure metrics collection for FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(MetricsMiddleware)
    app.add_route("/metrics", metrics_endpoint)

    logger.info("Prometheus metrics configured at /metrics")


def track_contact_mutation(operation: str) -> None:
    """Count a committed contact create, update or delete."""
    contact_mutations_total.labels(operation=operation).inc()


def track_note_created() -> None:
    notes_created_total.inc()


def track_preference_write() -> None:
    preference_writes_total.inc()
