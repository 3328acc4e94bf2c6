"""
Data store package.

``open_data_store`` picks a backend at construction time:

    duckdb  - DuckDBDataStore at ``db_path`` (errors propagate)
    memory  - InMemoryDataStore
    auto    - DuckDB, degrading to memory with a warning if it cannot open

A process-wide default store can be managed with ``initialize_data_store`` /
``get_data_store`` / ``close_data_store``; tests construct their own.
"""

import logging
from typing import Optional

from ..config import STORE_BACKENDS, load_settings
from ..errors import StoreError
from .base import DataStore, build_raw_cache_record
from .duckdb_store import IN_MEMORY_PATH, DuckDBDataStore
from .memory_store import InMemoryDataStore

logger = logging.getLogger(__name__)


def open_data_store(db_path: Optional[str] = None, backend: Optional[str] = None) -> DataStore:
    """
    Build a DataStore.

    Args:
        db_path: DuckDB path; defaults to ``HOOP_HUB_DB_PATH``
        backend: "auto", "duckdb" or "memory"; defaults to ``HOOP_HUB_STORE_BACKEND``

    Raises:
        ValueError: Unknown backend name
        StoreError: backend="duckdb" and the database cannot be opened
    """
    if db_path is None or backend is None:
        settings = load_settings()
        db_path = db_path if db_path is not None else settings.db_path
        backend = backend if backend is not None else settings.store_backend

    backend = backend.lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"Unknown store backend '{backend}'; expected one of {STORE_BACKENDS}")

    if backend == "memory":
        return InMemoryDataStore()

    if backend == "duckdb":
        return DuckDBDataStore(db_path)

    try:
        return DuckDBDataStore(db_path)
    except (StoreError, OSError) as e:
        logger.warning(f"DuckDB store unavailable ({e}); falling back to in-memory store")
        return InMemoryDataStore()


# GLOBAL DATA STORE

_data_store: Optional[DataStore] = None


def initialize_data_store(db_path: Optional[str] = None, backend: Optional[str] = None) -> DataStore:
    """Open the process default store, closing any previous one."""
    global _data_store
    if _data_store is not None:
        _data_store.close()
    _data_store = open_data_store(db_path=db_path, backend=backend)
    return _data_store


def get_data_store() -> DataStore:
    """
    Get the process default store.

    Raises:
        RuntimeError: If the store is not initialized
    """
    if _data_store is None:
        raise RuntimeError("Data store not initialized. Call initialize_data_store() first.")
    return _data_store


def close_data_store() -> None:
    global _data_store
    if _data_store is not None:
        _data_store.close()
        _data_store = None


__all__ = [
    "IN_MEMORY_PATH",
    "DataStore",
    "DuckDBDataStore",
    "InMemoryDataStore",
    "build_raw_cache_record",
    "close_data_store",
    "get_data_store",
    "initialize_data_store",
    "open_data_store",
]
