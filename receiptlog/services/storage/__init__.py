"""
Storage Services Package

Provides the abstract record store interface and its implementations.
SQLite (through SQLAlchemy) is the durable backend; the in-memory store
backs tests and throwaway sessions.
"""

from receiptlog.services.storage.interface import (
    IncompleteRecordError,
    PersistenceError,
    RecordStoreInterface,
    StorageError,
)
from receiptlog.services.storage.memory import InMemoryRecordStore
from receiptlog.services.storage.sql import ReceiptRow, SqlRecordStore, build_engine

__all__ = [
    # Interface
    "RecordStoreInterface",
    # Exceptions
    "IncompleteRecordError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryRecordStore",
    "ReceiptRow",
    "SqlRecordStore",
    "build_engine",
]
