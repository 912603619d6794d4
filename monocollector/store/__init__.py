"""Collection storage"""

from monocollector.store.memory_store import CollectionStore, collection_store

__all__ = ["CollectionStore", "collection_store"]
