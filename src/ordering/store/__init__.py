"""Storage factory.

Provides get_storage() / set_storage() to swap implementations:
- MemoryStorage for development and testing
- SqlStorage (PostgreSQL via SQLAlchemy) when ORDERS_STORE=sqlalchemy
"""

import threading

from shared.config import STORE_SQLALCHEMY, load_settings

from ordering.store.port import Storage

_current_storage: Storage | None = None
_storage_lock = threading.Lock()


def _build_storage() -> Storage:
    settings = load_settings()
    if settings.store_backend == STORE_SQLALCHEMY:
        from ordering.store.sql_adapter import SqlStorage

        return SqlStorage.from_url(settings.database_uri)

    from ordering.store.memory_adapter import MemoryStorage

    return MemoryStorage()


def get_storage() -> Storage:
    """Return the current storage, building it from settings on first use."""
    global _current_storage
    if _current_storage is None:
        with _storage_lock:
            if _current_storage is None:
                _current_storage = _build_storage()
    return _current_storage


def set_storage(storage: Storage) -> None:
    """Override the active storage (useful for tests)."""
    global _current_storage
    with _storage_lock:
        _current_storage = storage


def reset_storage() -> None:
    """Reset to the storage configured by the environment."""
    global _current_storage
    with _storage_lock:
        _current_storage = None
