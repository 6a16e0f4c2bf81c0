"""
Record store module - persistence of user state documents.

Backends:
- SqlDocumentStore: SQLAlchemy async, one JSON row per user
- MemoryDocumentStore: in-process dictionary
"""
from fitdash.services.store.base import (
    DocumentStore,
    document_key,
    merge_documents,
)
from fitdash.services.store.memory import MemoryDocumentStore
from fitdash.services.store.sql import SqlDocumentStore

__all__ = [
    "DocumentStore",
    "document_key",
    "merge_documents",
    "MemoryDocumentStore",
    "SqlDocumentStore",
]
