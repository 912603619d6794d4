"""Unit tests for request path normalization in the metrics middleware"""
import pytest

from monocollector.observability.metrics_middleware import normalize_path


@pytest.mark.parametrize("path,expected", [
    ("/metrics", "/metrics"),
    ("/api/health", "/api/health"),
    ("/api/v1/categories", "/api/v1/categories"),
    ("/api/v1/users/alice/items", "/api/v1/users/{user_id}/items"),
    ("/api/v1/users/alice/items/123", "/api/v1/users/{user_id}/items/{item_id}"),
    ("/api/v1/users/bob/collection/stats", "/api/v1/users/{user_id}/collection/stats"),
    ("/api/v1/users/bob/items/memories", "/api/v1/users/{user_id}/items/memories"),
])
def test_normalize_path(path, expected):
    """User and item ids collapse to placeholders"""
    assert normalize_path(path) == expected
