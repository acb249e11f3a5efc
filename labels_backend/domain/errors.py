"""
labels_backend.domain.errors — Exception hierarchy for the labels backend.

Every error raised on purpose by the backend derives from ``LabelsError`` and
carries the HTTP status the API layer should answer with.  Errors raised by
the store driver (``pymongo.errors.PyMongoError``) are never wrapped; they
propagate unchanged and surface as 500s.
"""

from __future__ import annotations


class LabelsError(Exception):
    """Base class for all labels backend errors."""
    status_code: int = 500
    message: str = "labels error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# ---------------------------------------------------------------------------
# Validation (400)
# ---------------------------------------------------------------------------

class ValidationError(LabelsError):
    status_code = 400
    message = "invalid request"


class InvalidLabelIDError(ValidationError):
    message = "invalid label id"


class InvalidLabelError(ValidationError):
    message = "invalid label"


class InvalidCustomerError(ValidationError):
    message = "invalid customer id"


class InvalidUserError(ValidationError):
    message = "invalid user email"


class InvalidNameError(ValidationError):
    message = "invalid label name"


class InvalidColorError(ValidationError):
    message = "invalid label color"


class EmptyRequestError(ValidationError):
    message = "request has nothing to update"


class InvalidObjectIDError(ValidationError):
    message = "invalid object id"


class InvalidObjectTypeError(ValidationError):
    message = "invalid object type"


class InvalidObjectsError(ValidationError):
    message = "request must contain at least one object"


class NoLabelsToAddOrRemoveError(ValidationError):
    message = "request must add or remove at least one label"


class DuplicatedObjectInRequestError(ValidationError):
    message = "object appears more than once in request"


class DuplicatedLabelInRequestError(ValidationError):
    message = "label appears more than once in request"


# ---------------------------------------------------------------------------
# Not found (404)
# ---------------------------------------------------------------------------

class NotFoundError(LabelsError):
    status_code = 404
    message = "not found"


class LabelNotFoundError(NotFoundError):
    def __init__(self, label_id: str) -> None:
        self.label_id = label_id
        super().__init__(f"label not found: {label_id}")


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: str) -> None:
        self.customer_id = customer_id
        super().__init__(f"customer not found: {customer_id}")


class DocumentNotFoundError(NotFoundError):
    def __init__(self, collection: str, document_id: str) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"document not found: {collection}/{document_id}")


# ---------------------------------------------------------------------------
# Permission (403)
# ---------------------------------------------------------------------------

class NoPermissionsError(LabelsError):
    status_code = 403

    def __init__(self, object_type: str, object_id: str) -> None:
        self.object_type = object_type
        self.object_id = object_id
        super().__init__(
            f"user does not have permission to edit {object_type} {object_id}"
        )


# ---------------------------------------------------------------------------
# Batch sizing (500, programmer error)
# ---------------------------------------------------------------------------

class BatchCapacityError(LabelsError):
    status_code = 500
    message = "batch capacity exceeded"


# ---------------------------------------------------------------------------
# Conflict (409)
# ---------------------------------------------------------------------------

class DocumentExistsError(LabelsError):
    status_code = 409

    def __init__(self, collection: str, document_id: str) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"document already exists: {collection}/{document_id}")
