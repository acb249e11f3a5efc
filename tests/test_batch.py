"""Tests for labels_backend.store.batch — threshold accounting and commit."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from bson import DBRef

from labels_backend.domain.errors import BatchCapacityError
from labels_backend.store.batch import Batch, BatchProvider
from labels_backend.store.document_store import CREATE, DELETE, UPDATE


def _ref(i: int) -> DBRef:
    return DBRef("things", f"t{i}")


class TestBatchProvider:
    def test_provides_batch_with_declared_threshold(self):
        provider = BatchProvider(MagicMock(), max_operations=10)
        batch = provider.provide_with_threshold(3)
        assert isinstance(batch, Batch)
        assert batch.threshold == 3

    def test_rejects_estimate_above_store_limit(self):
        provider = BatchProvider(MagicMock(), max_operations=10)
        with pytest.raises(BatchCapacityError):
            provider.provide_with_threshold(11)

    def test_rejects_empty_estimate(self):
        provider = BatchProvider(MagicMock(), max_operations=10)
        with pytest.raises(BatchCapacityError):
            provider.provide_with_threshold(0)

    def test_default_limit_comes_from_config(self, monkeypatch):
        from labels_backend.store import batch as batch_module

        monkeypatch.setattr(batch_module.config, "BATCH_MAX_OPERATIONS", 2)
        provider = BatchProvider(MagicMock())
        assert provider.max_operations == 2
        with pytest.raises(BatchCapacityError):
            provider.provide_with_threshold(3)


class TestBatch:
    def test_stages_operations_in_order(self):
        batch = Batch(MagicMock(), threshold=3)
        batch.create(_ref(1), {"a": 1})
        batch.update(_ref(2), {"b": 2})
        batch.delete(_ref(3), must_exist=True)

        kinds = [op.kind for op in batch.operations]
        assert kinds == [CREATE, UPDATE, DELETE]
        assert batch.operations[2].must_exist is True
        assert len(batch) == 3

    def test_fails_fast_when_threshold_exceeded(self):
        store = MagicMock()
        batch = Batch(store, threshold=1)
        batch.update(_ref(1), {"x": 1})
        with pytest.raises(BatchCapacityError):
            batch.update(_ref(2), {"x": 2})
        assert len(batch) == 1
        store.apply.assert_not_called()

    def test_commit_sends_all_operations_in_one_call(self):
        store = MagicMock()
        batch = Batch(store, threshold=2)
        batch.update(_ref(1), {"x": 1})
        batch.delete(_ref(2))
        batch.commit()

        store.apply.assert_called_once()
        ops = store.apply.call_args.args[0]
        assert [op.ref for op in ops] == [_ref(1), _ref(2)]

    def test_empty_commit_does_not_touch_store(self):
        store = MagicMock()
        Batch(store, threshold=1).commit()
        store.apply.assert_not_called()

    def test_committed_batch_cannot_be_reused(self):
        batch = Batch(MagicMock(), threshold=2)
        batch.update(_ref(1), {"x": 1})
        batch.commit()
        with pytest.raises(BatchCapacityError):
            batch.update(_ref(2), {"x": 2})
        with pytest.raises(BatchCapacityError):
            batch.commit()

    def test_commit_failure_propagates_unchanged(self):
        store = MagicMock()
        boom = RuntimeError("store down")
        store.apply.side_effect = boom
        batch = Batch(store, threshold=1)
        batch.update(_ref(1), {"x": 1})
        with pytest.raises(RuntimeError) as exc_info:
            batch.commit()
        assert exc_info.value is boom
