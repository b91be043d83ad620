# src/crm_pipeline/persistence/__init__.py
"""Persistência do pipeline: porta de escrita, stores e snapshots."""

from .memory_store import InMemoryStore, StoreWriteError
from .store import StoragePort, chunked, persist_positions, sanitize_row

__all__ = [
    "InMemoryStore",
    "StoreWriteError",
    "StoragePort",
    "chunked",
    "persist_positions",
    "sanitize_row",
]
