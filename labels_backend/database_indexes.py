"""
labels_backend.database_indexes — MongoDB index definitions.

Run ``ensure_all_indexes(db)`` once at startup (called from the app lifespan
when the Mongo backend is active).

Collections managed here:

  labels                       — one document per label, scoped by customer
  <labeled object collections> — reverse lookup on the embedded ``labels`` refs
"""

from __future__ import annotations

import logging

from pymongo import ASCENDING, DESCENDING, IndexModel

from labels_backend.core.constants import (
    CUSTOMER_FIELD,
    LABELS_COLLECTION,
    LABELS_FIELD,
    MODIFIED_AT_FIELD,
    OBJECTS_FIELD,
)
from labels_backend.dal.objects import OBJECT_KINDS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Index blueprints
# ---------------------------------------------------------------------------

INDEXES: dict[str, list[IndexModel]] = {
    LABELS_COLLECTION: [
        IndexModel([(f"{CUSTOMER_FIELD}.$id", ASCENDING)], name="customer_id"),
        IndexModel([(MODIFIED_AT_FIELD, DESCENDING)], name="modified_at_desc"),
        IndexModel([(f"{OBJECTS_FIELD}.$id", ASCENDING)], name="objects_id"),
    ],
}

for _kind in OBJECT_KINDS.values():
    INDEXES[_kind.collection] = [
        IndexModel([(f"{LABELS_FIELD}.$id", ASCENDING)], name="labels_id"),
    ]


def ensure_all_indexes(db) -> None:
    """Create every index in ``INDEXES``; failures are logged per collection."""
    for collection, models in INDEXES.items():
        try:
            db[collection].create_indexes(models)
            logger.debug("Indexes ensured on %s (%d)", collection, len(models))
        except Exception as exc:
            logger.warning("Could not create indexes on %s: %s", collection, exc)

    logger.info("database_indexes: all index definitions applied")
