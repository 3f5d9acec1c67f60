"""Adapters layer - document store implementations.

Following Cosmic Python Chapter 2: Repository Pattern.
"""

from .document_store import (
    AbstractDocumentStore,
    FakeDocumentStore,
    SqliteDocumentStore,
)


__all__ = [
    "AbstractDocumentStore",
    "FakeDocumentStore",
    "SqliteDocumentStore",
]
