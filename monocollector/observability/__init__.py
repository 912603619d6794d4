"""
Observability module for the MonoCollector service.

This module provides:
- Metrics collection with Prometheus
- HTTP metrics middleware
"""

__all__ = ["metrics", "metrics_middleware"]
