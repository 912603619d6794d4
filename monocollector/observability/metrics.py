"""
Prometheus metrics definitions for the MonoCollector service.

Metrics are grouped by category:
- HTTP/API metrics: request counts, latency, requests in progress
- Collection metrics: stats computations, item creation
- Icon metrics: generated icons by source and style
- Error metrics

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

# =============================================================================
# HTTP/API Metrics
# =============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests received",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

# =============================================================================
# Collection Metrics
# =============================================================================

collection_stats_computed_total = Counter(
    "collection_stats_computed_total",
    "Total collection stats computations",
)

collection_stats_duration_seconds = Histogram(
    "collection_stats_duration_seconds",
    "Time spent computing collection stats in seconds",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

items_created_total = Counter(
    "items_created_total",
    "Total collection items created",
    ["category"],
)

# =============================================================================
# Icon Metrics
# =============================================================================

icons_generated_total = Counter(
    "icons_generated_total",
    "Total SVG icons generated",
    ["source", "style"],  # source: name/photo
)

# =============================================================================
# Error Metrics
# =============================================================================

errors_total = Counter(
    "errors_total",
    "Total errors by type and component",
    ["error_type", "component"],  # component: api/engine/icons/store
)

logger.info("Prometheus metrics initialized")
