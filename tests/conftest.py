"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • store          — MemoryDocumentStore seeded with a customer, labels and objects
  • batch_provider — BatchProvider over ``store``
  • label_store    — LabelStore with a fixed clock
  • service        — LabelsService wired to the above
  • assert_linked  — checks both sides of a label/object link

Seeded state::

    label-1.objects = [alert-a, alert-b]      alert-a.labels = [label-1]
    label-2.objects = []                      alert-b.labels = [label-1]
                                              alert-c.labels = []
    metric-1 (owner: owner@example.com)       budget-locked (viewer only)
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone

import pytest
from bson import DBRef

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from labels_backend.core.constants import (
    ALERTS_COLLECTION,
    BUDGETS_COLLECTION,
    CUSTOMERS_COLLECTION,
    LABELS_COLLECTION,
    LABELS_FIELD,
    METRICS_COLLECTION,
)
from labels_backend.dal.labels import LabelStore
from labels_backend.service.labels import LabelsService
from labels_backend.store.batch import BatchProvider
from labels_backend.store.document_store import MemoryDocumentStore


OWNER = "owner@example.com"
EDITOR = "editor@example.com"
VIEWER = "viewer@example.com"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def alert_ref(object_id: str) -> DBRef:
    return DBRef(ALERTS_COLLECTION, object_id)


def lbl_ref(label_id: str) -> DBRef:
    return DBRef(LABELS_COLLECTION, label_id)


def _access(**roles) -> list:
    return [{"email": email, "role": role} for email, role in roles.items()]


def label_doc(label_id: str, objects: list) -> dict:
    return {
        "_id": label_id,
        "name": label_id,
        "color": "#BEE1F5",
        "createdBy": OWNER,
        "customer": DBRef(CUSTOMERS_COLLECTION, "customer-1"),
        "createdAt": FIXED_NOW,
        "modifiedAt": FIXED_NOW,
        "objects": objects,
    }


def shared_doc(object_id: str, labels: list) -> dict:
    return {
        "_id": object_id,
        "name": object_id,
        "collaborators": [
            {"email": OWNER, "role": "owner"},
            {"email": EDITOR, "role": "editor"},
            {"email": VIEWER, "role": "viewer"},
        ],
        "public": None,
        "labels": labels,
    }


@pytest.fixture
def store() -> MemoryDocumentStore:
    s = MemoryDocumentStore()
    s.insert_many(CUSTOMERS_COLLECTION, [{"_id": "customer-1", "name": "Acme"}])
    s.insert_many(LABELS_COLLECTION, [
        label_doc("label-1", [alert_ref("alert-a"), alert_ref("alert-b")]),
        label_doc("label-2", []),
    ])
    s.insert_many(ALERTS_COLLECTION, [
        shared_doc("alert-a", [lbl_ref("label-1")]),
        shared_doc("alert-b", [lbl_ref("label-1")]),
        shared_doc("alert-c", []),
    ])
    s.insert_many(METRICS_COLLECTION, [
        {"_id": "metric-1", "name": "metric-1", "owner": OWNER, "labels": []},
    ])
    s.insert_many(BUDGETS_COLLECTION, [
        {"_id": "budget-locked", "collaborators": _access(**{VIEWER: "viewer"}), "labels": []},
    ])
    s.commits = 0
    return s


@pytest.fixture
def batch_provider(store) -> BatchProvider:
    return BatchProvider(store, max_operations=500)


@pytest.fixture
def label_store(store, batch_provider) -> LabelStore:
    return LabelStore(store, batch_provider, clock=lambda: FIXED_NOW)


@pytest.fixture
def service(store, batch_provider, label_store) -> LabelsService:
    return LabelsService(store, batch_provider=batch_provider, label_store=label_store)


@pytest.fixture
def assert_linked(store):
    """Assert the object/label link exists (or not) on *both* sides."""
    def _check(label_id: str, object_ref: DBRef, linked: bool = True) -> None:
        stored_label = store.get(lbl_ref(label_id))
        object_doc = store.get(object_ref)
        in_label = object_ref.id in [r.id for r in stored_label["objects"]]
        in_object = label_id in [r.id for r in object_doc.get(LABELS_FIELD, [])]
        assert in_label == in_object == linked, (
            f"{label_id} <-> {object_ref.id}: label side={in_label}, object side={in_object}"
        )
    return _check
