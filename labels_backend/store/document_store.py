"""
Shared document store (MongoDB preferred, in-memory for tests and local runs).

Both backends expose the same small surface: read one document by reference,
and apply a list of write operations all-or-nothing.  Documents are addressed
by ``bson.DBRef(collection, id)``.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from bson import DBRef, ObjectId
from pymongo import MongoClient

from labels_backend import config
from labels_backend.core.constants import ID_FIELD
from labels_backend.domain.errors import DocumentExistsError, DocumentNotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------

CREATE = "create"
UPDATE = "update"
DELETE = "delete"


@dataclass
class WriteOp:
    """One staged mutation.  ``data`` holds the full document for creates and
    the fields to overwrite for updates."""
    kind: str
    ref: DBRef
    data: Dict[str, Any] = field(default_factory=dict)
    must_exist: bool = False

    @classmethod
    def create(cls, ref: DBRef, data: Dict[str, Any]) -> "WriteOp":
        return cls(CREATE, ref, dict(data))

    @classmethod
    def update(cls, ref: DBRef, data: Dict[str, Any]) -> "WriteOp":
        return cls(UPDATE, ref, dict(data), must_exist=True)

    @classmethod
    def delete(cls, ref: DBRef, must_exist: bool = False) -> "WriteOp":
        return cls(DELETE, ref, must_exist=must_exist)


def new_document_id() -> str:
    return str(ObjectId())


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------

class DocumentStore:
    backend: str = "none"

    def get(self, ref: DBRef) -> Optional[Dict[str, Any]]:
        """Return the stored document (including ``_id``) or ``None``."""
        raise NotImplementedError

    def apply(self, ops: List[WriteOp]) -> None:
        """Apply every op or none of them."""
        raise NotImplementedError

    def ping(self) -> None:
        raise NotImplementedError

    def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> None:
        ops = []
        for doc in documents:
            body = {k: v for k, v in doc.items() if k != ID_FIELD}
            ops.append(WriteOp.create(DBRef(collection, str(doc[ID_FIELD])), body))
        if ops:
            self.apply(ops)


class MemoryDocumentStore(DocumentStore):
    backend = "memory"

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.commits = 0

    def get(self, ref: DBRef) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._data.get(ref.collection, {}).get(ref.id)
            if doc is None:
                return None
            return copy.deepcopy(doc)

    def apply(self, ops: List[WriteOp]) -> None:
        with self._lock:
            # Work on shallow copies of the touched collections and swap them
            # in only when every op succeeded.
            working: Dict[str, Dict[str, Dict[str, Any]]] = {}
            for op in ops:
                coll = op.ref.collection
                if coll not in working:
                    working[coll] = dict(self._data.get(coll, {}))
                docs = working[coll]
                current = docs.get(op.ref.id)

                if op.kind == CREATE:
                    if current is not None:
                        raise DocumentExistsError(coll, op.ref.id)
                    docs[op.ref.id] = {ID_FIELD: op.ref.id, **copy.deepcopy(op.data)}
                elif op.kind == UPDATE:
                    if current is None:
                        raise DocumentNotFoundError(coll, op.ref.id)
                    docs[op.ref.id] = {**current, **copy.deepcopy(op.data)}
                elif op.kind == DELETE:
                    if current is None:
                        if op.must_exist:
                            raise DocumentNotFoundError(coll, op.ref.id)
                        continue
                    del docs[op.ref.id]
                else:
                    raise ValueError(f"unknown write op: {op.kind}")

            self._data.update(working)
            self.commits += 1

    def ping(self) -> None:
        return None


class MongoDocumentStore(DocumentStore):
    """MongoDB backend.  Batches run inside one client-session transaction,
    which needs a replica set (or a mongos) on the server side."""
    backend = "mongo"

    def __init__(self, url: str, database: str) -> None:
        self._client = MongoClient(
            url,
            tz_aware=True,
            serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS,
        )
        self._db = self._client[database]

    @property
    def db(self):
        return self._db

    def get(self, ref: DBRef) -> Optional[Dict[str, Any]]:
        return self._db[ref.collection].find_one({ID_FIELD: ref.id})

    def apply(self, ops: List[WriteOp]) -> None:
        if not ops:
            return
        with self._client.start_session() as session:
            session.with_transaction(lambda s: self._apply_ops(ops, s))

    def _apply_ops(self, ops: List[WriteOp], session) -> None:
        for op in ops:
            coll = self._db[op.ref.collection]
            if op.kind == CREATE:
                coll.insert_one({ID_FIELD: op.ref.id, **op.data}, session=session)
            elif op.kind == UPDATE:
                res = coll.update_one(
                    {ID_FIELD: op.ref.id}, {"$set": op.data}, session=session,
                )
                if res.matched_count == 0:
                    raise DocumentNotFoundError(op.ref.collection, op.ref.id)
            elif op.kind == DELETE:
                res = coll.delete_one({ID_FIELD: op.ref.id}, session=session)
                if op.must_exist and res.deleted_count == 0:
                    raise DocumentNotFoundError(op.ref.collection, op.ref.id)
            else:
                raise ValueError(f"unknown write op: {op.kind}")

    def ping(self) -> None:
        self._client.admin.command("ping")

    def close(self) -> None:
        self._client.close()


# ---------------------------------------------------------------------------
# Shared instance
# ---------------------------------------------------------------------------

_store_singleton: Optional[DocumentStore] = None
_store_lock = threading.Lock()


def get_document_store() -> DocumentStore:
    global _store_singleton
    if _store_singleton is not None:
        return _store_singleton

    with _store_lock:
        if _store_singleton is not None:
            return _store_singleton

        if config.STORE_BACKEND == "memory":
            _store_singleton = MemoryDocumentStore()
        else:
            _store_singleton = MongoDocumentStore(config.MONGODB_URL, config.DATABASE_NAME)
        logger.info("Document store backend: %s", _store_singleton.backend)
        return _store_singleton


def set_document_store(store: Optional[DocumentStore]) -> None:
    global _store_singleton
    with _store_lock:
        _store_singleton = store
