"""
labels_backend.store — document store backends and batched writes.
"""

from labels_backend.store.batch import Batch, BatchProvider
from labels_backend.store.document_store import (
    DocumentStore,
    MemoryDocumentStore,
    MongoDocumentStore,
    WriteOp,
    get_document_store,
)

__all__ = [
    "Batch",
    "BatchProvider",
    "DocumentStore",
    "MemoryDocumentStore",
    "MongoDocumentStore",
    "WriteOp",
    "get_document_store",
]
