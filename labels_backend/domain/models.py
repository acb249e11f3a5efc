"""
labels_backend.domain.models — Canonical dataclass models.

These are the single source of truth for data flowing between the HTTP
boundary, the services and the store layer.  References between documents are
``bson.DBRef`` values (collection + id), stored as-is inside documents.

Import pattern::

    from labels_backend.domain.models import Label, Access, AssignLabelsRequest
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import DBRef

from labels_backend.core.constants import (
    COLLABORATORS_FIELD,
    COLOR_FIELD,
    CREATED_AT_FIELD,
    CREATED_BY_FIELD,
    CUSTOMER_FIELD,
    ID_FIELD,
    LABELS_COLLECTION,
    MODIFIED_AT_FIELD,
    NAME_FIELD,
    OBJECTS_FIELD,
    PUBLIC_FIELD,
)
from labels_backend.domain.enums import CollaboratorRole, LabelColor, ObjectType


def refs_from_value(value: Any) -> List[DBRef]:
    """Return the DBRefs held in a stored reference array.

    Anything that is not a list, and any element that is not a reference, is
    ignored: a missing or malformed field reads as "no references".
    """
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, DBRef)]


# ---------------------------------------------------------------------------
# Label
# ---------------------------------------------------------------------------

@dataclass
class Label:
    """A customer-scoped tag that can be attached to labeled objects."""
    id: str = ""
    name: str = ""
    color: Optional[LabelColor] = None
    created_by: str = ""
    customer: Optional[DBRef] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    objects: List[DBRef] = field(default_factory=list)

    @property
    def ref(self) -> DBRef:
        return DBRef(LABELS_COLLECTION, self.id)

    def to_document(self) -> Dict[str, Any]:
        """Stored layout, without ``_id``."""
        return {
            NAME_FIELD: self.name,
            COLOR_FIELD: self.color.value if self.color is not None else None,
            CREATED_BY_FIELD: self.created_by,
            CUSTOMER_FIELD: self.customer,
            CREATED_AT_FIELD: self.created_at,
            MODIFIED_AT_FIELD: self.modified_at,
            OBJECTS_FIELD: list(self.objects),
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Label":
        raw_color = doc.get(COLOR_FIELD)
        try:
            color = LabelColor(raw_color) if raw_color is not None else None
        except ValueError:
            color = None
        customer = doc.get(CUSTOMER_FIELD)
        return cls(
            id=str(doc[ID_FIELD]),
            name=doc.get(NAME_FIELD) or "",
            color=color,
            created_by=doc.get(CREATED_BY_FIELD) or "",
            customer=customer if isinstance(customer, DBRef) else None,
            created_at=doc.get(CREATED_AT_FIELD),
            modified_at=doc.get(MODIFIED_AT_FIELD),
            objects=refs_from_value(doc.get(OBJECTS_FIELD)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color.value if self.color is not None else None,
            "createdBy": self.created_by,
            "customer": self.customer.id if self.customer is not None else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "modifiedAt": self.modified_at.isoformat() if self.modified_at else None,
            "objects": [
                {"collection": ref.collection, "id": ref.id} for ref in self.objects
            ],
        }


# ---------------------------------------------------------------------------
# Access (owner + collaborators with roles)
# ---------------------------------------------------------------------------

@dataclass
class Collaborator:
    email: str
    role: CollaboratorRole


@dataclass
class Access:
    """
    Sharing settings carried by alerts, attribution groups, attributions,
    budgets and reports.  Metrics use a bare ``owner`` field instead.
    """
    collaborators: List[Collaborator] = field(default_factory=list)
    public: Optional[CollaboratorRole] = None

    def can_edit(self, email: str) -> bool:
        if self.public == CollaboratorRole.EDITOR:
            return True
        return any(
            c.email == email and c.role.can_edit for c in self.collaborators
        )

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Access":
        collaborators: List[Collaborator] = []
        for raw in doc.get(COLLABORATORS_FIELD) or []:
            if not isinstance(raw, dict):
                continue
            try:
                role = CollaboratorRole(raw.get("role"))
            except ValueError:
                continue
            collaborators.append(Collaborator(email=raw.get("email") or "", role=role))

        public = None
        raw_public = doc.get(PUBLIC_FIELD)
        if raw_public is not None:
            try:
                public = CollaboratorRole(raw_public)
            except ValueError:
                public = None
        return cls(collaborators=collaborators, public=public)


# ---------------------------------------------------------------------------
# Requests handed to the services by the HTTP boundary (already validated)
# ---------------------------------------------------------------------------

@dataclass
class CreateLabelRequest:
    name: str
    color: LabelColor
    customer_id: str
    user_email: str


@dataclass
class UpdateLabelRequest:
    label_id: str
    name: Optional[str] = None
    color: Optional[LabelColor] = None


@dataclass(frozen=True)
class LabeledObject:
    object_id: str
    object_type: ObjectType


@dataclass
class AssignLabelsRequest:
    customer_id: str
    objects: List[LabeledObject] = field(default_factory=list)
    add_labels: List[str] = field(default_factory=list)
    remove_labels: List[str] = field(default_factory=list)
