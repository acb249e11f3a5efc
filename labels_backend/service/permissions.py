"""
Edit-permission checks for labeled objects.

Five kinds keep an Access value (collaborators with roles, optional public
role); metrics keep a bare ``owner`` e-mail.  Which reader applies is decided
by the kind table in ``labels_backend.dal.objects``.
"""

from __future__ import annotations

import logging

from labels_backend.dal.objects import object_kind
from labels_backend.domain.enums import ObjectType
from labels_backend.domain.errors import DocumentNotFoundError
from labels_backend.store.document_store import DocumentStore

logger = logging.getLogger(__name__)


class PermissionResolver:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def check_edit_permission(
        self,
        requester_email: str,
        object_id: str,
        object_type: ObjectType,
    ) -> bool:
        kind = object_kind(object_type)
        ref = kind.get_ref(object_id)
        doc = self._store.get(ref)
        if doc is None:
            raise DocumentNotFoundError(ref.collection, object_id)

        allowed = kind.can_edit(doc, requester_email)
        if not allowed:
            logger.warning(
                "Edit denied: %s on %s %s", requester_email, kind.object_type.value, object_id,
            )
        return allowed
