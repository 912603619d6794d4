"""API routes for the collection service"""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from monocollector.api.auth import verify_api_key
from monocollector.api.middleware import limiter
from monocollector.api.models import (
    AchievementsResponse,
    CategoryListResponse,
    HealthCheckResponse,
    ItemCreateRequest,
    ItemListResponse,
    ItemUpdateRequest,
    NameIconRequest,
    PhotoIconRequest,
    UnlockCheckResponse,
)
from monocollector.collection.achievement_system import (
    build_counters,
    get_achievement_progress,
    partition_achievements,
)
from monocollector.collection.memories import MemoriesResult, find_memories
from monocollector.collection.stats_engine import calculate_collection_stats
from monocollector.collection.streak_system import calculate_streak
from monocollector.collection.unlock_tracker import build_notifications
from monocollector.exceptions import RecordNotFoundError, ValidationError
from monocollector.icons.name_icon import GeneratedIcon, generate_icon
from monocollector.icons.photo_icon import PhotoIcon, decode_data_url, generate_icon_from_photo
from monocollector.models.collection import CollectionStats
from monocollector.models.item import DEFAULT_CATEGORIES, Item
from monocollector.observability.metrics import errors_total, items_created_total
from monocollector.store.memory_store import collection_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(e: RecordNotFoundError) -> HTTPException:
    errors_total.labels(error_type="not_found", component="api").inc()
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.user_message)


def _bad_request(e: ValidationError) -> HTTPException:
    errors_total.labels(error_type="validation", component="api").inc()
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.user_message)


def _internal_error(e: Exception, action: str) -> HTTPException:
    logger.error(f"Error {action}: {e}", exc_info=True)
    errors_total.labels(error_type=type(e).__name__, component="api").inc()
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e)
    )


# ==========================================
# Health & categories
# ==========================================

@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    return HealthCheckResponse(
        status="healthy",
        timestamp=datetime.now(),
        checks={"store": "in-memory"}
    )


@router.get("/api/v1/categories", response_model=CategoryListResponse)
@limiter.limit("60/minute")
async def list_categories(
    request: Request,
    user_id: Optional[str] = None,
    api_key: str = Depends(verify_api_key)
):
    """Category list; with user_id the item counts are that user's"""
    try:
        categories = collection_store.get_categories(user_id) if user_id else list(DEFAULT_CATEGORIES)
        return CategoryListResponse(categories=categories)
    except Exception as e:
        raise _internal_error(e, "listing categories")


# ==========================================
# Items
# ==========================================

@router.post("/api/v1/users/{user_id}/items", response_model=Item, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_item(
    request: Request,
    user_id: str,
    payload: ItemCreateRequest,
    api_key: str = Depends(verify_api_key)
):
    """Add an item to a user's collection (Rate limit: 30/minute)"""
    try:
        item = collection_store.create_item(user_id, payload.to_item())
        items_created_total.labels(category=item.category).inc()
        return item
    except ValidationError as e:
        raise _bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(e, "creating item")


@router.get("/api/v1/users/{user_id}/items", response_model=ItemListResponse)
@limiter.limit("60/minute")
async def list_items(
    request: Request,
    user_id: str,
    category: Optional[str] = None,
    api_key: str = Depends(verify_api_key)
):
    """List items newest first, optionally filtered by category"""
    try:
        items = collection_store.list_items(user_id, category=category)
        return ItemListResponse(user_id=user_id, items=items, total=len(items))
    except Exception as e:
        raise _internal_error(e, "listing items")


# Registered before /items/{item_id} so "memories" is not taken as an id
@router.get("/api/v1/users/{user_id}/items/memories", response_model=MemoriesResult)
@limiter.limit("60/minute")
async def get_memories(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Items registered 1 week, 2 weeks, 1 month, 3 months and 1 year ago"""
    try:
        return find_memories(collection_store.list_items(user_id))
    except Exception as e:
        raise _internal_error(e, "finding memories")


@router.get("/api/v1/users/{user_id}/items/{item_id}", response_model=Item)
@limiter.limit("60/minute")
async def get_item(
    request: Request,
    user_id: str,
    item_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Get a single item"""
    try:
        return collection_store.get_item(user_id, item_id)
    except RecordNotFoundError as e:
        raise _not_found(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(e, "getting item")


@router.patch("/api/v1/users/{user_id}/items/{item_id}", response_model=Item)
@limiter.limit("30/minute")
async def update_item(
    request: Request,
    user_id: str,
    item_id: str,
    payload: ItemUpdateRequest,
    api_key: str = Depends(verify_api_key)
):
    """Partially update an item"""
    try:
        changes = payload.model_dump(exclude_unset=True)
        return collection_store.update_item(user_id, item_id, changes)
    except RecordNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise _bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(e, "updating item")


@router.delete("/api/v1/users/{user_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
async def delete_item(
    request: Request,
    user_id: str,
    item_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Delete an item"""
    try:
        collection_store.delete_item(user_id, item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except RecordNotFoundError as e:
        raise _not_found(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(e, "deleting item")


# ==========================================
# Gamification
# ==========================================

def _compute_stats(user_id: str) -> CollectionStats:
    items = collection_store.list_items(user_id)
    categories = collection_store.get_categories(user_id)
    return calculate_collection_stats(items, categories, calculate_streak(items))


@router.get("/api/v1/users/{user_id}/collection/stats", response_model=CollectionStats)
@limiter.limit("60/minute")
async def get_collection_stats(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Level, EXP, achievements, badges and breakdowns for a collection"""
    try:
        return _compute_stats(user_id)
    except Exception as e:
        raise _internal_error(e, "computing collection stats")


@router.get("/api/v1/users/{user_id}/collection/achievements", response_model=AchievementsResponse)
@limiter.limit("60/minute")
async def get_collection_achievements(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Unlocked achievements plus progress toward every locked one"""
    try:
        items = collection_store.list_items(user_id)
        counters = build_counters(items, calculate_streak(items))
        unlocked, locked = partition_achievements(counters)

        return AchievementsResponse(
            user_id=user_id,
            unlocked=unlocked,
            locked=[get_achievement_progress(a, counters) for a in locked],
        )
    except Exception as e:
        raise _internal_error(e, "getting achievements")


@router.post("/api/v1/users/{user_id}/collection/unlocks", response_model=UnlockCheckResponse)
@limiter.limit("30/minute")
async def check_unlocks(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """
    Report badges, achievements and level-ups gained since the last check

    The new snapshot is stored, so calling twice in a row reports nothing
    the second time.
    """
    try:
        stats = _compute_stats(user_id)
        events = collection_store.record_unlocks(user_id, stats)

        return UnlockCheckResponse(
            user_id=user_id,
            events=events,
            notifications=build_notifications(events),
        )
    except Exception as e:
        raise _internal_error(e, "checking unlocks")


# ==========================================
# Icons
# ==========================================

@router.post("/api/v1/icons/name", response_model=GeneratedIcon)
@limiter.limit("60/minute")
async def create_name_icon(
    request: Request,
    payload: NameIconRequest,
    api_key: str = Depends(verify_api_key)
):
    """Generate an SVG icon from an item name"""
    try:
        return generate_icon(payload.name, style=payload.style, size=payload.size)
    except Exception as e:
        raise _internal_error(e, "generating name icon")


@router.post("/api/v1/icons/photo", response_model=PhotoIcon)
@limiter.limit("20/minute")
async def create_photo_icon(
    request: Request,
    payload: PhotoIconRequest,
    api_key: str = Depends(verify_api_key)
):
    """Generate an SVG icon from a photo (Rate limit: 20/minute, image decoding is costly)"""
    try:
        image_bytes = decode_data_url(payload.image)
        return generate_icon_from_photo(image_bytes, style=payload.style, size=payload.size)
    except ValidationError as e:
        raise _bad_request(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error(e, "generating photo icon")
