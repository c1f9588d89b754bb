"""Services module."""

from tumbi.services.storage_service import ObjectStore, StorageError, get_object_store, object_store

__all__ = [
    "ObjectStore",
    "StorageError",
    "get_object_store",
    "object_store",
]
