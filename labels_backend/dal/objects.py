"""
labels_backend.dal.objects — Labeled-object kinds.

One ``ObjectKind`` per ``ObjectType`` ties together the two per-kind concerns
the engine needs: where the documents live (reference resolution) and how
edit permission is read off a stored document.  Both the reference resolver
and the permission resolver dispatch through ``OBJECT_KINDS``; no other module
switches on the object type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

from bson import DBRef

from labels_backend.core.constants import (
    ALERTS_COLLECTION,
    ATTRIBUTION_GROUPS_COLLECTION,
    ATTRIBUTIONS_COLLECTION,
    BUDGETS_COLLECTION,
    METRICS_COLLECTION,
    OWNER_FIELD,
    REPORTS_COLLECTION,
)
from labels_backend.domain.enums import ObjectType
from labels_backend.domain.errors import InvalidObjectTypeError
from labels_backend.domain.models import Access


def access_can_edit(doc: Dict[str, Any], email: str) -> bool:
    return Access.from_document(doc).can_edit(email)


def owner_can_edit(doc: Dict[str, Any], email: str) -> bool:
    owner = doc.get(OWNER_FIELD)
    return isinstance(owner, str) and owner == email


@dataclass(frozen=True)
class ObjectKind:
    object_type: ObjectType
    collection: str
    can_edit: Callable[[Dict[str, Any], str], bool]

    def get_ref(self, object_id: str) -> DBRef:
        """Reference to ``object_id`` in this kind's collection.

        No existence check: a stale id only fails once it is read or written.
        """
        return DBRef(self.collection, object_id)


OBJECT_KINDS: Dict[ObjectType, ObjectKind] = {
    ObjectType.ALERT: ObjectKind(ObjectType.ALERT, ALERTS_COLLECTION, access_can_edit),
    ObjectType.ATTRIBUTION_GROUP: ObjectKind(
        ObjectType.ATTRIBUTION_GROUP, ATTRIBUTION_GROUPS_COLLECTION, access_can_edit,
    ),
    ObjectType.ATTRIBUTION: ObjectKind(
        ObjectType.ATTRIBUTION, ATTRIBUTIONS_COLLECTION, access_can_edit,
    ),
    ObjectType.BUDGET: ObjectKind(ObjectType.BUDGET, BUDGETS_COLLECTION, access_can_edit),
    ObjectType.METRIC: ObjectKind(ObjectType.METRIC, METRICS_COLLECTION, owner_can_edit),
    ObjectType.REPORT: ObjectKind(ObjectType.REPORT, REPORTS_COLLECTION, access_can_edit),
}


def object_kind(object_type: Any) -> ObjectKind:
    """Return the kind for ``object_type`` (enum member or its string value)."""
    try:
        return OBJECT_KINDS[ObjectType(object_type)]
    except (KeyError, ValueError):
        raise InvalidObjectTypeError(f"invalid object type: {object_type!r}") from None


class ObjectReferenceResolver:
    """Maps ``(object_id, object_type)`` to a document reference."""

    def get_ref(self, object_id: str, object_type: ObjectType) -> DBRef:
        return object_kind(object_type).get_ref(object_id)
