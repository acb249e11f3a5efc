"""
labels_backend.service.labels — Application service behind the labels API.

Wires the label store, the object kind table, the permission resolver and the
assignment engine together.  Requests reaching this layer have already been
validated by the HTTP boundary; the requester e-mail is always passed in
explicitly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from labels_backend.core.constants import LABELS_FIELD
from labels_backend.dal.labels import LabelStore, customer_ref
from labels_backend.dal.objects import ObjectReferenceResolver
from labels_backend.domain.errors import CustomerNotFoundError
from labels_backend.domain.models import (
    AssignLabelsRequest,
    CreateLabelRequest,
    Label,
    LabeledObject,
    UpdateLabelRequest,
)
from labels_backend.service.assignment import AssignmentEngine
from labels_backend.service.permissions import PermissionResolver
from labels_backend.store.batch import BatchProvider
from labels_backend.store.document_store import DocumentStore, get_document_store

logger = logging.getLogger(__name__)


class LabelsService:
    def __init__(
        self,
        store: DocumentStore,
        batch_provider: Optional[BatchProvider] = None,
        label_store: Optional[LabelStore] = None,
    ) -> None:
        self._store = store
        self._batch_provider = batch_provider or BatchProvider(store)
        self._labels = label_store or LabelStore(store, self._batch_provider)
        self._resolver = ObjectReferenceResolver()
        self._engine = AssignmentEngine(
            self._labels,
            self._resolver,
            PermissionResolver(store),
            self._batch_provider,
        )

    # ------------------------------------------------------------------
    # Label CRUD
    # ------------------------------------------------------------------

    def create_label(self, req: CreateLabelRequest) -> Label:
        customer = customer_ref(req.customer_id)
        if self._store.get(customer) is None:
            raise CustomerNotFoundError(req.customer_id)

        return self._labels.create(Label(
            name=req.name,
            color=req.color,
            created_by=req.user_email,
            customer=customer,
        ))

    def get_label(self, label_id: str) -> Label:
        return self._labels.get(label_id)

    def update_label(self, req: UpdateLabelRequest) -> Label:
        return self._labels.update(req.label_id, name=req.name, color=req.color)

    def delete_label(self, label_id: str) -> None:
        """Delete a label and remove it from every object that carries it."""
        label = self._labels.get(label_id)

        batch = self._batch_provider.provide_with_threshold(len(label.objects) + 1)
        batch.delete(label.ref)
        for object_ref in label.objects:
            current = self._labels.get_object_labels(object_ref)
            remaining = [r for r in current if r.id != label.id]
            batch.update(object_ref, {LABELS_FIELD: remaining})
        batch.commit()

        logger.info("Deleted label %s (%d object(s) detached)", label_id, len(label.objects))

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign_labels(self, req: AssignLabelsRequest, requester_email: str) -> None:
        self._engine.assign_labels(req, requester_email)

    # ------------------------------------------------------------------
    # Object deletion (called from the domain services' delete paths)
    # ------------------------------------------------------------------

    def delete_object(self, obj: LabeledObject) -> None:
        ref = self._resolver.get_ref(obj.object_id, obj.object_type)
        self._labels.delete_object_with_labels(ref)

    def delete_objects(self, objects: List[LabeledObject]) -> None:
        # No per-object permission check here, unlike assign_labels.
        refs = [self._resolver.get_ref(o.object_id, o.object_type) for o in objects]
        self._labels.delete_many_objects_with_labels(refs)


def get_labels_service() -> LabelsService:
    """FastAPI dependency: a service bound to the shared document store."""
    return LabelsService(get_document_store())
