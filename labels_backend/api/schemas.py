"""
Labels backend — API request schemas (Pydantic).

Every body field is optional.  ``to_request`` turns a body into the validated
dataclass the services accept, reporting missing or malformed values as one
of the domain validation errors (400).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from labels_backend.domain.enums import LabelColor, ObjectType
from labels_backend.domain.errors import (
    DuplicatedLabelInRequestError,
    DuplicatedObjectInRequestError,
    EmptyRequestError,
    InvalidColorError,
    InvalidCustomerError,
    InvalidLabelIDError,
    InvalidNameError,
    InvalidObjectIDError,
    InvalidObjectsError,
    InvalidObjectTypeError,
    InvalidUserError,
    NoLabelsToAddOrRemoveError,
)
from labels_backend.domain.models import (
    AssignLabelsRequest,
    CreateLabelRequest,
    LabeledObject,
    UpdateLabelRequest,
)


def _parse_color(value: Optional[str]) -> LabelColor:
    try:
        return LabelColor(value)
    except ValueError:
        raise InvalidColorError() from None


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class CreateLabelBody(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

    def to_request(self, customer_id: str, user_email: Optional[str]) -> CreateLabelRequest:
        if not customer_id:
            raise InvalidCustomerError()
        if not user_email:
            raise InvalidUserError()
        name = (self.name or "").strip()
        if not name:
            raise InvalidNameError()
        return CreateLabelRequest(
            name=name,
            color=_parse_color(self.color),
            customer_id=customer_id,
            user_email=user_email,
        )


class UpdateLabelBody(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

    def to_request(self, label_id: str) -> UpdateLabelRequest:
        if self.name is None and self.color is None:
            raise EmptyRequestError()
        if not label_id:
            raise InvalidLabelIDError()

        name = None
        if self.name is not None:
            name = self.name.strip()
            if not name:
                raise InvalidNameError()
        color = _parse_color(self.color) if self.color is not None else None
        return UpdateLabelRequest(label_id=label_id, name=name, color=color)


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------

class LabeledObjectBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    object_id: Optional[str] = Field(default=None, alias="objectID")
    object_type: Optional[str] = Field(default=None, alias="objectType")


class AssignLabelsBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    objects: List[LabeledObjectBody] = Field(default_factory=list)
    add_labels: List[str] = Field(default_factory=list, alias="addLabels")
    remove_labels: List[str] = Field(default_factory=list, alias="removeLabels")

    def to_request(self, customer_id: str) -> AssignLabelsRequest:
        if not customer_id:
            raise InvalidCustomerError()
        if not self.add_labels and not self.remove_labels:
            raise NoLabelsToAddOrRemoveError()
        if not self.objects:
            raise InvalidObjectsError()

        objects: List[LabeledObject] = []
        seen = set()
        for body in self.objects:
            if not body.object_id:
                raise InvalidObjectIDError()
            try:
                object_type = ObjectType(body.object_type)
            except ValueError:
                raise InvalidObjectTypeError() from None
            if body.object_id in seen:
                raise DuplicatedObjectInRequestError()
            seen.add(body.object_id)
            objects.append(LabeledObject(object_id=body.object_id, object_type=object_type))

        label_ids = self.add_labels + self.remove_labels
        if any(not label_id for label_id in label_ids):
            raise InvalidLabelIDError()
        if len(set(label_ids)) != len(label_ids):
            raise DuplicatedLabelInRequestError()

        return AssignLabelsRequest(
            customer_id=customer_id,
            objects=objects,
            add_labels=list(self.add_labels),
            remove_labels=list(self.remove_labels),
        )
