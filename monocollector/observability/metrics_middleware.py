"""
FastAPI middleware for automatic Prometheus metrics collection.

This middleware automatically tracks:
- Request counts by endpoint, method, and status code
- Request latency histograms
- Requests in progress (concurrent requests)
"""

import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from monocollector.observability.metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
)

logger = logging.getLogger(__name__)

_FIXED_ITEM_ROUTES = {"memories"}


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect Prometheus metrics for HTTP requests.

    Automatically tracks:
    - Total requests (counter) by method, endpoint, status
    - Request duration (histogram) by method, endpoint
    - Requests in progress (gauge) by method, endpoint
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        method = request.method
        path = normalize_path(request.url.path)

        http_requests_in_progress.labels(method=method, endpoint=path).inc()
        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code

        except Exception as e:
            logger.error(f"Request failed: {e}", exc_info=True)
            raise

        finally:
            http_requests_in_progress.labels(method=method, endpoint=path).dec()
            duration = time.time() - start_time

            http_requests_total.labels(
                method=method, endpoint=path, status=status_code
            ).inc()

            http_request_duration_seconds.labels(
                method=method, endpoint=path
            ).observe(duration)

        return response


def normalize_path(path: str) -> str:
    """
    Normalize request path to reduce cardinality.

    User and item ids are free-form strings, so any segment that follows
    `users` or `items` is replaced with a placeholder:
    - /api/v1/users/alice/items/123 -> /api/v1/users/{user_id}/items/{item_id}

    Args:
        path: The raw request path

    Returns:
        Normalized path pattern
    """
    if path in ["/metrics", "/api/health", "/"]:
        return path

    parts = path.strip("/").split("/")
    normalized_parts = []
    for index, part in enumerate(parts):
        parent = parts[index - 1] if index > 0 else ""
        if parent == "users":
            normalized_parts.append("{user_id}")
        elif parent == "items" and index > 3 and part not in _FIXED_ITEM_ROUTES:
            normalized_parts.append("{item_id}")
        else:
            normalized_parts.append(part)

    return "/" + "/".join(normalized_parts)


def setup_metrics_middleware(app):
    """
    Add Prometheus metrics middleware to FastAPI application.

    Args:
        app: FastAPI application instance
    """
    from monocollector.config import ENABLE_METRICS

    if not ENABLE_METRICS:
        logger.info("Metrics collection is disabled (ENABLE_METRICS=false)")
        return

    app.add_middleware(PrometheusMiddleware)
    logger.info("Prometheus metrics middleware added to FastAPI")
