"""Global test fixtures and utilities for monocollector tests"""
import struct
import zlib
import pytest
from datetime import datetime, timedelta
from io import BytesIO

from PIL import Image

from monocollector.models.item import DEFAULT_CATEGORIES, Item


# ============================================================================
# Collection Fixtures
# ============================================================================

@pytest.fixture
def base_time():
    """Fixed reference time for deterministic items"""
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def categories():
    """Default category table (fresh copies)"""
    return [c.model_copy() for c in DEFAULT_CATEGORIES]


@pytest.fixture
def make_item(base_time):
    """Factory for items; created_at defaults to base_time"""
    def _make(name="テスト", category="food", created_at=None, **kwargs):
        return Item(name=name, category=category, created_at=created_at or base_time, **kwargs)
    return _make


@pytest.fixture
def ten_items_three_categories(make_item, base_time):
    """10 items across food, books and toys, one per hour"""
    cats = ["food", "books", "toys"]
    return [
        make_item(name=f"item-{i}", category=cats[i % 3], created_at=base_time - timedelta(hours=i))
        for i in range(10)
    ]


# ============================================================================
# Image Fixtures
# ============================================================================

@pytest.fixture
def make_png():
    """Factory encoding a solid-color PNG"""
    def _make(color=(255, 0, 0), size=(20, 20)):
        buffer = BytesIO()
        Image.new("RGB", size, color).save(buffer, format="PNG")
        return buffer.getvalue()
    return _make


@pytest.fixture
def red_png(make_png):
    return make_png((255, 0, 0))


@pytest.fixture
def mostly_green_png():
    """80x80 image: green except a blue bottom quarter"""
    image = Image.new("RGB", (80, 80), (0, 255, 0))
    for x in range(80):
        for y in range(60, 80):
            image.putpixel((x, y), (0, 0, 255))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_forged_png():
    """Factory for a tiny PNG whose header claims the given dimensions"""
    def _chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    def _make(width, height):
        header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
        return (
            b"\x89PNG\r\n\x1a\n"
            + _chunk(b"IHDR", header)
            + _chunk(b"IDAT", zlib.compress(b""))
            + _chunk(b"IEND", b"")
        )
    return _make


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def test_api_key():
    """Standard test API key"""
    return "test_api_key_12345"


@pytest.fixture
def auth_headers(test_api_key):
    return {"Authorization": f"Bearer {test_api_key}"}


@pytest.fixture
def api_app(monkeypatch, test_api_key):
    """Fresh app with a known API key, empty store and reset rate limits"""
    from monocollector.api.middleware import limiter
    from monocollector.api.server import create_api_application
    from monocollector.store.memory_store import collection_store

    monkeypatch.setenv("API_KEYS", test_api_key)
    collection_store.clear()
    limiter.reset()

    yield create_api_application()

    collection_store.clear()
    limiter.reset()


@pytest.fixture
def client(api_app):
    from fastapi.testclient import TestClient

    with TestClient(api_app) as test_client:
        yield test_client
