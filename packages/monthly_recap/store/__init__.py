"""Record stores: the persistence contract and its two backends."""

from .base import ProductRepository, RecordStore, TransactionRepository
from .memory import InMemoryStore
from .sql import SqlStore

__all__ = [
    "InMemoryStore",
    "ProductRepository",
    "RecordStore",
    "SqlStore",
    "TransactionRepository",
]
