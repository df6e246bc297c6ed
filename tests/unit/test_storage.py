from __future__ import annotations

import pytest

from artledger.runtime.storage import MAX_KEY_BYTES, StorageError, Store


def test_set_get_delete():
    s = Store()
    assert s.get(b"k") is None
    s.set(b"k", b"v")
    assert s.get(b"k") == b"v"
    assert s.snapshot() == {b"k": b"v"}
    s.delete(b"k")
    assert s.get(b"k") is None


def test_empty_value_means_absent():
    s = Store()
    s.set(b"k", b"v")
    s.set(b"k", b"")
    assert s.get(b"k") is None
    assert s.snapshot() == {}


def test_key_validation():
    s = Store()
    with pytest.raises(StorageError):
        s.get(b"")
    with pytest.raises(StorageError):
        s.set(b"x" * (MAX_KEY_BYTES + 1), b"v")
    with pytest.raises(StorageError):
        s.set("k", b"v")  # type: ignore[arg-type]
    with pytest.raises(StorageError):
        s.set(b"k", "v")  # type: ignore[arg-type]


def test_int_helpers():
    s = Store()
    assert s.get_int(b"n") == 0
    assert s.get_int(b"n", default=1) == 1
    s.set_int(b"n", 0)
    assert s.get(b"n") == b"\x00"
    assert s.get_int(b"n", default=1) == 0
    s.set_int(b"n", 258)
    assert s.get(b"n") == b"\x01\x02"
    assert s.get_int(b"n") == 258
    with pytest.raises(StorageError):
        s.set_int(b"n", -1)
    with pytest.raises(StorageError):
        s.set_int(b"n", 1 << 256)
    with pytest.raises(StorageError):
        s.set_int(b"n", True)


def test_set_bytes_none_deletes():
    s = Store()
    s.set_bytes(b"k", b"v")
    s.set_bytes(b"k", None)
    assert s.get(b"k") is None


def test_commit_merges_into_base():
    base = {}
    s = Store(base)
    s.begin()
    s.set(b"a", b"1")
    assert base == {}
    s.commit()
    assert base == {b"a": b"1"}
    assert s.depth() == 0


def test_revert_discards():
    s = Store()
    s.set(b"a", b"1")
    s.begin()
    s.set(b"a", b"2")
    s.delete(b"a")
    assert s.get(b"a") is None
    s.revert()
    assert s.get(b"a") == b"1"


def test_nested_checkpoints():
    s = Store()
    s.begin()
    s.set(b"a", b"outer")
    s.begin()
    s.set(b"a", b"inner")
    s.set(b"b", b"inner")
    s.commit()
    assert s.depth() == 1
    assert s.get(b"a") == b"inner"
    s.revert()
    assert s.snapshot() == {}


def test_staged_delete_commits_to_base():
    base = {b"a": b"1"}
    s = Store(base)
    with s.atomic():
        s.delete(b"a")
    assert base == {}


def test_atomic_reverts_on_exception():
    s = Store()
    s.set(b"keep", b"1")
    with pytest.raises(RuntimeError):
        with s.atomic():
            s.set(b"keep", b"2")
            s.set(b"new", b"x")
            raise RuntimeError("boom")
    assert s.snapshot() == {b"keep": b"1"}
    assert s.depth() == 0


def test_commit_or_revert_without_checkpoint():
    s = Store()
    with pytest.raises(StorageError):
        s.commit()
    with pytest.raises(StorageError):
        s.revert()


def test_snapshot_flattens_overlays():
    s = Store({b"a": b"1", b"b": b"2"})
    s.begin()
    s.delete(b"a")
    s.set(b"c", b"3")
    assert s.snapshot() == {b"b": b"2", b"c": b"3"}
