"""Document store implementations."""

from shopledger.store.base import Collection, DocumentStore, to_document
from shopledger.store.memory import MemoryCollection, MemoryStore
from shopledger.store.sql import SqlCollection, SqlStore

__all__ = [
    "Collection",
    "DocumentStore",
    "MemoryCollection",
    "MemoryStore",
    "SqlCollection",
    "SqlStore",
    "to_document",
]
