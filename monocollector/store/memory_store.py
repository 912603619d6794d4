"""
In-memory collection store

Holds items, categories and unlock snapshots per user. Data lives only for
the lifetime of the process. A single lock guards all maps so the store can
be shared between the event loop and FastAPI's worker threads.
"""

from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError as PydanticValidationError

from monocollector.collection.unlock_tracker import GamificationSnapshot, UnlockEvents, detect_unlocks
from monocollector.models.collection import CollectionStats
from monocollector.exceptions import RecordNotFoundError, ValidationError
from monocollector.models.item import DEFAULT_CATEGORIES, Category, Item

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id", "created_at"}


class CollectionStore:
    """Per-user items, categories and unlock snapshots"""

    def __init__(self):
        self._lock = Lock()
        self._items: Dict[str, Dict[str, Item]] = {}
        self._categories: Dict[str, List[Category]] = {}
        self._snapshots: Dict[str, GamificationSnapshot] = {}
        logger.info("CollectionStore initialized (in-memory, not persisted)")

    # ---- categories ----

    def _categories_for(self, user_id: str) -> List[Category]:
        if user_id not in self._categories:
            self._categories[user_id] = [c.model_copy() for c in DEFAULT_CATEGORIES]
        return self._categories[user_id]

    def _recount(self, user_id: str) -> None:
        counts: Dict[str, int] = {}
        for item in self._items.get(user_id, {}).values():
            counts[item.category] = counts.get(item.category, 0) + 1
        for category in self._categories_for(user_id):
            category.item_count = counts.get(category.id, 0)

    def _validate(self, user_id: str, item: Item) -> None:
        if not item.name.strip():
            raise ValidationError("Item name must not be blank", field="name", value=item.name, user_id=user_id)
        known = {c.id for c in self._categories_for(user_id)}
        if item.category not in known:
            raise ValidationError(
                f"Unknown category '{item.category}'", field="category", value=item.category, user_id=user_id
            )
        if item.quantity < 1:
            raise ValidationError("Quantity must be at least 1", field="quantity", value=item.quantity, user_id=user_id)

    def get_categories(self, user_id: str) -> List[Category]:
        """Categories in display order, with current item counts"""
        with self._lock:
            return [c.model_copy() for c in self._categories_for(user_id)]

    # ---- items ----

    def create_item(self, user_id: str, item: Item) -> Item:
        with self._lock:
            self._validate(user_id, item)
            user_items = self._items.setdefault(user_id, {})
            if item.id in user_items:
                raise ValidationError(f"Item {item.id} already exists", field="id", value=item.id, user_id=user_id)
            user_items[item.id] = item
            self._recount(user_id)

        logger.info(f"Item created for user {user_id}: {item.id} ({item.category})")
        return item

    def _not_found(self, user_id: str, item_id: str) -> RecordNotFoundError:
        return RecordNotFoundError(
            f"Item {item_id} not found for user {user_id}",
            record_type="Item",
            record_id=item_id,
            user_id=user_id,
        )

    def get_item(self, user_id: str, item_id: str) -> Item:
        with self._lock:
            item = self._items.get(user_id, {}).get(item_id)
        if item is None:
            raise self._not_found(user_id, item_id)
        return item

    def list_items(self, user_id: str, category: Optional[str] = None) -> List[Item]:
        """Items newest first, optionally limited to one category"""
        with self._lock:
            items = list(self._items.get(user_id, {}).values())
        if category:
            items = [i for i in items if i.category == category]
        return sorted(items, key=lambda i: i.created_at.timestamp(), reverse=True)

    def update_item(self, user_id: str, item_id: str, changes: Dict[str, Any]) -> Item:
        """
        Apply a partial update; id and created_at cannot change

        The merged item is re-validated, so a null sent for a required field
        is rejected instead of stored.

        Raises:
            RecordNotFoundError: If the item does not exist (or was deleted meanwhile)
            ValidationError: If the merged item is invalid
        """
        updates = {k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS}

        with self._lock:
            current = self._items.get(user_id, {}).get(item_id)
            if current is None:
                raise self._not_found(user_id, item_id)

            try:
                updated = Item.model_validate({**current.model_dump(), **updates, "updated_at": datetime.now()})
            except PydanticValidationError as e:
                error = e.errors()[0]
                field = str(error["loc"][0]) if error["loc"] else None
                raise ValidationError(
                    error["msg"], field=field, value=updates.get(field), user_id=user_id
                ) from e

            self._validate(user_id, updated)
            self._items[user_id][item_id] = updated
            self._recount(user_id)

        logger.info(f"Item updated for user {user_id}: {item_id} ({', '.join(sorted(updates))})")
        return updated

    def delete_item(self, user_id: str, item_id: str) -> None:
        with self._lock:
            removed = self._items.get(user_id, {}).pop(item_id, None)
            if removed is None:
                raise self._not_found(user_id, item_id)
            self._recount(user_id)
        logger.info(f"Item deleted for user {user_id}: {item_id}")

    # ---- snapshots ----

    def get_snapshot(self, user_id: str) -> Optional[GamificationSnapshot]:
        with self._lock:
            return self._snapshots.get(user_id)

    def save_snapshot(self, user_id: str, snapshot: GamificationSnapshot) -> None:
        with self._lock:
            self._snapshots[user_id] = snapshot

    def record_unlocks(self, user_id: str, stats: CollectionStats) -> UnlockEvents:
        """Diff stats against the stored snapshot and store the new one in one step"""
        with self._lock:
            events = detect_unlocks(self._snapshots.get(user_id), stats)
            self._snapshots[user_id] = events.snapshot
        return events

    def clear(self) -> None:
        """Drop all data (used by tests)"""
        with self._lock:
            self._items.clear()
            self._categories.clear()
            self._snapshots.clear()


# Global instance
collection_store = CollectionStore()
