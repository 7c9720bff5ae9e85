"""Client storage factory.

Provides get_storage() / set_storage() to swap implementations:
- MemoryStorage for development and testing (default)
- JsonFileStorage when STOREFRONT_STORAGE=file, rooted at STOREFRONT_STORAGE_DIR
"""

import os

from storefront.storage.file_adapter import JsonFileStorage
from storefront.storage.memory_adapter import MemoryStorage
from storefront.storage.port import ClientStorage

_current_storage: ClientStorage | None = None


def get_storage() -> ClientStorage:
    """Return the current client storage, building it from the environment on first use."""
    global _current_storage
    if _current_storage is None:
        adapter = os.environ.get("STOREFRONT_STORAGE", "memory")
        if adapter == "file":
            _current_storage = JsonFileStorage(os.environ.get("STOREFRONT_STORAGE_DIR", ".storefront"))
        else:
            _current_storage = MemoryStorage()
    return _current_storage


def set_storage(storage: ClientStorage) -> None:
    """Override the active client storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to default storage."""
    global _current_storage
    _current_storage = None
