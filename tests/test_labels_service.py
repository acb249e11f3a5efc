"""Tests for labels_backend.service.labels.LabelsService."""

from __future__ import annotations

import pytest
from bson import DBRef

from conftest import FIXED_NOW, OWNER, alert_ref, lbl_ref
from labels_backend.core.constants import METRICS_COLLECTION
from labels_backend.domain.enums import LabelColor, ObjectType
from labels_backend.domain.errors import (
    CustomerNotFoundError,
    InvalidObjectTypeError,
    LabelNotFoundError,
)
from labels_backend.domain.models import (
    AssignLabelsRequest,
    CreateLabelRequest,
    LabeledObject,
    UpdateLabelRequest,
)


class TestCreateLabel:
    def test_creates_empty_label_for_customer(self, service):
        label = service.create_label(CreateLabelRequest(
            name="Production", color=LabelColor.TEAL,
            customer_id="customer-1", user_email=OWNER,
        ))

        assert label.name == "Production"
        assert label.color == LabelColor.TEAL
        assert label.created_by == OWNER
        assert label.customer.id == "customer-1"
        assert label.objects == []
        assert label.created_at == FIXED_NOW

    def test_unknown_customer(self, service, store):
        with pytest.raises(CustomerNotFoundError):
            service.create_label(CreateLabelRequest(
                name="x", color=LabelColor.GREY,
                customer_id="ghost", user_email=OWNER,
            ))
        assert store.commits == 0


def test_update_label_renames(service):
    label = service.update_label(UpdateLabelRequest(label_id="label-2", name="Renamed"))
    assert label.name == "Renamed"
    assert service.get_label("label-2").name == "Renamed"


class TestDeleteLabel:
    def test_detaches_from_every_object(self, service, store):
        service.delete_label("label-1")

        assert store.get(lbl_ref("label-1")) is None
        assert store.get(alert_ref("alert-a"))["labels"] == []
        assert store.get(alert_ref("alert-b"))["labels"] == []
        assert store.commits == 1

    def test_keeps_other_labels_on_objects(self, service, store):
        service.assign_labels(
            AssignLabelsRequest("customer-1", [LabeledObject("alert-a", ObjectType.ALERT)],
                                add_labels=["label-2"]),
            OWNER,
        )
        service.delete_label("label-1")
        assert store.get(alert_ref("alert-a"))["labels"] == [lbl_ref("label-2")]

    def test_unknown_label(self, service):
        with pytest.raises(LabelNotFoundError):
            service.delete_label("ghost")


class TestDeleteObjects:
    def test_single_object_cascade(self, service, store):
        service.delete_object(LabeledObject("alert-b", ObjectType.ALERT))

        assert store.get(alert_ref("alert-b")) is None
        assert store.get(lbl_ref("label-1"))["objects"] == [alert_ref("alert-a")]

    def test_many_objects_keep_survivors(self, service, store):
        service.assign_labels(
            AssignLabelsRequest("customer-1", [LabeledObject("alert-c", ObjectType.ALERT)],
                                add_labels=["label-1"]),
            OWNER,
        )
        assert [o.id for o in store.get(lbl_ref("label-1"))["objects"]] == [
            "alert-a", "alert-b", "alert-c",
        ]

        service.delete_objects([
            LabeledObject("alert-a", ObjectType.ALERT),
            LabeledObject("alert-b", ObjectType.ALERT),
        ])

        assert store.get(lbl_ref("label-1"))["objects"] == [alert_ref("alert-c")]

    def test_many_objects_across_kinds(self, service, store):
        service.assign_labels(
            AssignLabelsRequest("customer-1", [LabeledObject("metric-1", ObjectType.METRIC)],
                                add_labels=["label-2"]),
            OWNER,
        )
        service.delete_objects([
            LabeledObject("metric-1", ObjectType.METRIC),
            LabeledObject("alert-a", ObjectType.ALERT),
        ])
        assert store.get(DBRef(METRICS_COLLECTION, "metric-1")) is None
        assert store.get(lbl_ref("label-2"))["objects"] == []
        assert store.get(lbl_ref("label-1"))["objects"] == [alert_ref("alert-b")]

    def test_unknown_kind_is_rejected(self, service):
        with pytest.raises(InvalidObjectTypeError):
            service.delete_objects([LabeledObject("x", "dashboard")])
