"""
Tests for InternalStore and store resolution.
"""

import pytest

from cattri.constants import STORE_ATTRIBUTE, TRACE
from cattri.exceptions import CattriError, FinalAttributeError
from cattri.store import InternalStore, StoreEntry, store_for


@pytest.mark.unit
class TestInternalStore:
    """Test InternalStore operations."""

    def test_empty(self):
        """Test a new store holds nothing."""
        store = InternalStore()
        assert len(store) == 0
        assert not store.has("x")
        assert store.get("x") is None
        assert store.get("x", 5) == 5

    def test_set_and_get(self):
        """Test values can be stored and overwritten."""
        store = InternalStore()
        assert store.set("x", 1) == 1
        store.set("x", 2)
        assert store.get("x") == 2
        assert "x" in store
        assert store.keys() == ["x"]
        assert store.items() == [("x", 2)]

    def test_final_locks(self):
        """Test a final write locks the entry permanently."""
        store = InternalStore()
        store.set("x", 1, final=True)
        assert store.is_locked("x")
        with pytest.raises(FinalAttributeError):
            store.set("x", 2)
        with pytest.raises(FinalAttributeError):
            store.set("x", 2, final=True)
        assert store.get("x") == 1

    def test_memoize_computes_once(self):
        """Test memoize stores the computed value on first use only."""
        store = InternalStore()
        calls = []

        def compute():
            calls.append(1)
            return [len(calls)]

        first = store.memoize("x", False, compute)
        second = store.memoize("x", False, compute)
        assert first is second
        assert calls == [1]
        assert not store.is_locked("x")

    def test_memoize_final_locks(self):
        """Test memoized final values are locked."""
        store = InternalStore()
        store.memoize("x", True, lambda: 1)
        assert store.is_locked("x")

    def test_memoize_logs_trace(self, trace_logs):
        """Test materialization is traced."""
        InternalStore().memoize("x", False, lambda: 1)
        records = [
            r for r in trace_logs.records if r.getMessage() == "materialized value"
        ]
        assert records
        assert records[0].levelno == TRACE
        assert records[0].levelname == "TRACE"
        assert records[0].key == "x"

    def test_put_entry(self):
        """Test prepared entries keep their lock flag."""
        store = InternalStore()
        store.put_entry("x", StoreEntry([1], locked=True))
        assert store.entry("x") == StoreEntry([1], True)
        with pytest.raises(FinalAttributeError):
            store.put_entry("x", StoreEntry([2]))

    def test_discard(self):
        """Test discard removes entries, locked ones included."""
        store = InternalStore()
        store.set("x", 1, final=True)
        store.discard("x")
        store.discard("missing")
        assert not store.has("x")
        store.set("x", 2)
        assert store.get("x") == 2

    def test_iteration_snapshot(self):
        """Test iteration is not disturbed by writes."""
        store = InternalStore()
        store.set("a", 1)
        for key in store:
            store.set(key + "b", 2)
        assert sorted(store.keys()) == ["a", "ab"]


@pytest.mark.unit
class TestStoreFor:
    """Test store_for()."""

    def test_instance_store_created_lazily(self):
        """Test instances get a store in their own __dict__."""

        class Host:
            pass

        obj = Host()
        assert store_for(obj, create=False) is None
        store = store_for(obj)
        assert vars(obj)[STORE_ATTRIBUTE] is store
        assert store_for(obj) is store

    def test_class_store_not_inherited(self):
        """Test a subclass never resolves its parent's store."""

        class Parent:
            pass

        class Child(Parent):
            pass

        parent_store = store_for(Parent)
        assert store_for(Child, create=False) is None
        assert store_for(Child) is not parent_store

    def test_owner_without_dict(self):
        """Test owners without __dict__ raise CattriError."""

        class Slotted:
            __slots__ = ()

        with pytest.raises(CattriError, match="no __dict__"):
            store_for(Slotted())
