"""
labels_backend.dal.labels — Label documents and the ``labels`` field of
labeled objects.

Besides plain CRUD on the ``labels`` collection, this module owns the
object-side cascade: deleting labeled objects together with their entry in
every label that references them, in one batch.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from bson import DBRef

from labels_backend.core.constants import (
    COLOR_FIELD,
    CUSTOMERS_COLLECTION,
    LABELS_COLLECTION,
    LABELS_FIELD,
    MODIFIED_AT_FIELD,
    NAME_FIELD,
    OBJECTS_FIELD,
)
from labels_backend.domain.enums import LabelColor
from labels_backend.domain.errors import (
    DocumentNotFoundError,
    InvalidLabelError,
    InvalidLabelIDError,
    LabelNotFoundError,
)
from labels_backend.domain.models import Label, refs_from_value
from labels_backend.store.batch import BatchProvider
from labels_backend.store.document_store import DocumentStore, WriteOp, new_document_id

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def label_ref(label_id: str) -> DBRef:
    return DBRef(LABELS_COLLECTION, label_id)


def customer_ref(customer_id: str) -> DBRef:
    return DBRef(CUSTOMERS_COLLECTION, customer_id)


class LabelStore:
    def __init__(
        self,
        store: DocumentStore,
        batch_provider: BatchProvider,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._batch_provider = batch_provider
        self._clock = clock

    # ------------------------------------------------------------------
    # Label CRUD
    # ------------------------------------------------------------------

    def get(self, label_id: str) -> Label:
        if not label_id:
            raise InvalidLabelIDError()
        doc = self._store.get(label_ref(label_id))
        if doc is None:
            raise LabelNotFoundError(label_id)
        return Label.from_document(doc)

    def get_many(self, label_ids: List[str]) -> List[Label]:
        """Return labels in the order of ``label_ids``.

        Stops at the first id that does not resolve.
        """
        if not label_ids:
            raise InvalidLabelIDError()
        return [self.get(label_id) for label_id in label_ids]

    def create(self, label: Optional[Label]) -> Label:
        if label is None:
            raise InvalidLabelError()

        now = self._clock()
        label.id = label.id or new_document_id()
        label.created_at = now
        label.modified_at = now
        self._store.apply([WriteOp.create(label.ref, label.to_document())])
        logger.info("Created label %s (%r)", label.id, label.name)
        return self.get(label.id)

    def update(
        self,
        label_id: str,
        name: Optional[str] = None,
        color: Optional[LabelColor] = None,
    ) -> Label:
        if not label_id:
            raise InvalidLabelIDError()

        fields: Dict[str, object] = {}
        if name is not None:
            fields[NAME_FIELD] = name
        if color is not None:
            fields[COLOR_FIELD] = LabelColor(color).value
        fields[MODIFIED_AT_FIELD] = self._clock()

        try:
            self._store.apply([WriteOp.update(label_ref(label_id), fields)])
        except DocumentNotFoundError:
            raise LabelNotFoundError(label_id) from None
        return self.get(label_id)

    # ------------------------------------------------------------------
    # Object side
    # ------------------------------------------------------------------

    def get_object_labels(self, object_ref: DBRef) -> List[DBRef]:
        """Label references stored on ``object_ref``.

        A missing or malformed ``labels`` field reads as an empty list; a
        missing document raises ``DocumentNotFoundError``.
        """
        doc = self._store.get(object_ref)
        if doc is None:
            raise DocumentNotFoundError(object_ref.collection, str(object_ref.id))
        return refs_from_value(doc.get(LABELS_FIELD))

    def delete_object_with_labels(self, object_ref: DBRef) -> None:
        """Delete ``object_ref`` and drop it from every label referencing it."""
        labels = [self.get(ref.id) for ref in self.get_object_labels(object_ref)]

        batch = self._batch_provider.provide_with_threshold(len(labels) + 1)
        for label in labels:
            remaining = [o for o in label.objects if o != object_ref]
            batch.update(label.ref, {OBJECTS_FIELD: remaining})
        batch.delete(object_ref, must_exist=True)
        batch.commit()

        logger.info(
            "Deleted %s/%s and detached it from %d label(s)",
            object_ref.collection, object_ref.id, len(labels),
        )

    def delete_many_objects_with_labels(self, object_refs: List[DBRef]) -> None:
        """Delete every object in ``object_refs`` and detach them from all
        affected labels in a single batch.

        Objects that are already gone are treated as carrying no labels.
        """
        if not object_refs:
            return

        deleted = set(object_refs)
        affected: Dict[str, Label] = {}
        for object_ref in object_refs:
            doc = self._store.get(object_ref)
            if doc is None:
                continue
            for ref in refs_from_value(doc.get(LABELS_FIELD)):
                if ref.id not in affected:
                    affected[ref.id] = self.get(ref.id)

        batch = self._batch_provider.provide_with_threshold(
            len(object_refs) + len(affected)
        )
        for object_ref in object_refs:
            batch.delete(object_ref)
        for label in affected.values():
            remaining = [o for o in label.objects if o not in deleted]
            batch.update(label.ref, {OBJECTS_FIELD: remaining})
        batch.commit()

        logger.info(
            "Deleted %d object(s) and detached them from %d label(s)",
            len(object_refs), len(affected),
        )
