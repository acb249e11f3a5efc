"""
labels_backend.service.assignment — Attach and detach labels on objects.

``AssignmentEngine.assign_labels`` keeps ``Label.objects`` and
``Object.labels`` in step:

  1. Load every label to add and to remove (fails on the first unknown id).
  2. For each target object: check the requester may edit it, read its
     current labels, drop the removed ones, append the added ones that are not
     already there.  Removal is computed against the list as read, so a label
     that is both added and removed ends up attached.
  3. Drop the targets from each removed label, append the missing targets to
     each added label (membership by object id).
  4. Commit every staged update as one batch sized
     ``objects + add labels + remove labels``.

Reads are not isolated from concurrent writers.  Each staged write replaces
the whole reference array, so two concurrent calls on the same document end
with whichever batch committed last (last-writer-wins).
"""

from __future__ import annotations

import logging
from typing import Dict, List

from bson import DBRef

from labels_backend.core.constants import LABELS_FIELD, OBJECTS_FIELD
from labels_backend.dal.labels import LabelStore
from labels_backend.dal.objects import ObjectReferenceResolver, object_kind
from labels_backend.domain.errors import NoPermissionsError
from labels_backend.domain.models import AssignLabelsRequest, Label, LabeledObject
from labels_backend.service.permissions import PermissionResolver
from labels_backend.store.batch import BatchProvider

logger = logging.getLogger(__name__)


class AssignmentEngine:
    def __init__(
        self,
        label_store: LabelStore,
        resolver: ObjectReferenceResolver,
        permissions: PermissionResolver,
        batch_provider: BatchProvider,
    ) -> None:
        self._labels = label_store
        self._resolver = resolver
        self._permissions = permissions
        self._batch_provider = batch_provider

    def assign_labels(self, req: AssignLabelsRequest, requester_email: str) -> None:
        add_labels = self._labels.get_many(req.add_labels) if req.add_labels else []
        remove_labels = self._labels.get_many(req.remove_labels) if req.remove_labels else []

        remove_labels_by_id: Dict[str, Label] = {l.id: l for l in remove_labels}
        objects_by_id: Dict[str, LabeledObject] = {o.object_id: o for o in req.objects}

        batch = self._batch_provider.provide_with_threshold(
            len(req.objects) + len(add_labels) + len(remove_labels)
        )

        object_refs: List[DBRef] = []
        for obj in req.objects:
            # Callers may pass the enum member or its string value.
            object_type = object_kind(obj.object_type).object_type
            ref = self._resolver.get_ref(obj.object_id, object_type)
            if not self._permissions.check_edit_permission(
                requester_email, obj.object_id, object_type,
            ):
                raise NoPermissionsError(object_type.value, obj.object_id)

            current = self._labels.get_object_labels(ref)
            new_labels = [r for r in current if r.id not in remove_labels_by_id]
            present = {r.id for r in new_labels}
            for label in add_labels:
                if label.id not in present:
                    new_labels.append(label.ref)
                    present.add(label.id)

            batch.update(ref, {LABELS_FIELD: new_labels})
            object_refs.append(ref)

        for label in remove_labels:
            remaining = [o for o in label.objects if o.id not in objects_by_id]
            batch.update(label.ref, {OBJECTS_FIELD: remaining})

        for label in add_labels:
            objects = list(label.objects)
            present = {o.id for o in objects}
            for ref in object_refs:
                if ref.id not in present:
                    objects.append(ref)
                    present.add(ref.id)
            batch.update(label.ref, {OBJECTS_FIELD: objects})

        batch.commit()

        logger.info(
            "Customer %s: %d object(s), +%d/-%d label(s)",
            req.customer_id, len(req.objects), len(add_labels), len(remove_labels),
        )
