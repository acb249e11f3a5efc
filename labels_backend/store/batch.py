"""
Batched writes with an up-front operation budget.

A caller declares how many operations it is about to stage, stages them, and
commits once.  Nothing is split into several physical batches: staging more
operations than declared is a sizing bug in the caller and fails immediately,
before anything reaches the store.

A failed commit leaves the store untouched.  Retrying means redoing the whole
logical operation (re-reading current state and recomputing the diff), not
re-submitting the same batch.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import DBRef

from labels_backend import config
from labels_backend.domain.errors import BatchCapacityError
from labels_backend.store.document_store import DocumentStore, WriteOp

logger = logging.getLogger(__name__)


class Batch:
    """Staged write operations bounded by ``threshold``."""

    def __init__(self, store: DocumentStore, threshold: int) -> None:
        self._store = store
        self._threshold = threshold
        self._ops: List[WriteOp] = []
        self._committed = False

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def operations(self) -> List[WriteOp]:
        return list(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    def _stage(self, op: WriteOp) -> None:
        if self._committed:
            raise BatchCapacityError("batch already committed")
        if len(self._ops) + 1 > self._threshold:
            raise BatchCapacityError(
                f"batch threshold of {self._threshold} operations exceeded"
            )
        self._ops.append(op)

    def create(self, ref: DBRef, data: Dict[str, Any]) -> None:
        self._stage(WriteOp.create(ref, data))

    def update(self, ref: DBRef, data: Dict[str, Any]) -> None:
        self._stage(WriteOp.update(ref, data))

    def delete(self, ref: DBRef, must_exist: bool = False) -> None:
        self._stage(WriteOp.delete(ref, must_exist=must_exist))

    def commit(self) -> None:
        if self._committed:
            raise BatchCapacityError("batch already committed")
        if not self._ops:
            self._committed = True
            return
        logger.debug(
            "Committing batch: %d/%d operations", len(self._ops), self._threshold,
        )
        self._store.apply(self._ops)
        self._committed = True


class BatchProvider:
    """Hands out batches sized against the store's per-batch ceiling."""

    def __init__(self, store: DocumentStore, max_operations: Optional[int] = None) -> None:
        self._store = store
        self._max_operations = max_operations or config.BATCH_MAX_OPERATIONS

    @property
    def max_operations(self) -> int:
        return self._max_operations

    def provide_with_threshold(self, estimated_op_count: int) -> Batch:
        if estimated_op_count < 1:
            raise BatchCapacityError(
                f"batch must hold at least one operation, got {estimated_op_count}"
            )
        if estimated_op_count > self._max_operations:
            raise BatchCapacityError(
                f"{estimated_op_count} operations exceed the store limit of "
                f"{self._max_operations} per batch"
            )
        logger.debug("Providing batch for %d operations", estimated_op_count)
        return Batch(self._store, estimated_op_count)
