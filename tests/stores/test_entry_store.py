"""Tests for the SQLite entry store."""

from gmail_order_status.stores.entry_store import EntryStore


def test_upsert_twice_keeps_one_row(entry_store):
    assert entry_store.upsert(7, 3, "Paid") is True
    assert entry_store.upsert(7, 3, "Paid") is True

    assert entry_store.count() == 1
    assert entry_store.get_value(7, 3) == "Paid"


def test_upsert_updates_existing_value(entry_store):
    entry_store.upsert(7, 3, "Paid")
    entry_store.upsert(7, 3, "Shipped")
    entry_store.upsert(7, 4, "1Z999")

    assert entry_store.get_values(7) == {3: "Shipped", 4: "1Z999"}
    assert entry_store.count() == 2


def test_upsert_rejects_non_positive_ids(entry_store):
    assert entry_store.upsert(0, 3, "Paid") is False
    assert entry_store.upsert(7, -1, "Paid") is False
    assert entry_store.count() == 0


def test_get_value_missing(entry_store):
    assert entry_store.get_value(1, 1) is None
    assert entry_store.get_values(1) == {}


def test_store_persists_to_file(tmp_path):
    path = tmp_path / "nested" / "entries.sqlite3"
    with EntryStore(path) as store:
        store.upsert(1, 2, "Paid")

    with EntryStore(path) as store:
        assert store.get_value(1, 2) == "Paid"
