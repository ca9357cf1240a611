"""
Entity store: id assignment, atomic updates and per-table isolation.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, replace

import pytest

from yearboard.dashboard.entities import ContentKind
from yearboard.dashboard.store import EntityStore, Table


@dataclass
class _Row:
    id: int
    value: int = 0


def test_ids_increase_and_are_not_reused_after_delete():
    table: Table[_Row] = Table("rows")
    first = table.insert(lambda rid: _Row(id=rid))
    second = table.insert(lambda rid: _Row(id=rid))
    assert (first.id, second.id) == (1, 2)

    assert table.remove(second.id) is True
    third = table.insert(lambda rid: _Row(id=rid))
    assert third.id == 3


def test_remove_missing_row_returns_false():
    table: Table[_Row] = Table("rows")
    assert table.remove(42) is False


def test_update_returns_none_for_missing_row():
    table: Table[_Row] = Table("rows")
    assert table.update(1, lambda row: row) is None


def test_update_leaves_row_untouched_when_mutation_raises():
    table: Table[_Row] = Table("rows")
    row = table.insert(lambda rid: _Row(id=rid, value=1))

    def _boom(_row):
        raise PermissionError("no")

    with pytest.raises(PermissionError):
        table.update(row.id, _boom)
    assert table.get(row.id) == _Row(id=row.id, value=1)


def test_list_applies_predicate():
    table: Table[_Row] = Table("rows")
    for value in (1, 2, 3, 4):
        table.insert(lambda rid, v=value: _Row(id=rid, value=v))
    assert sorted(r.value for r in table.list(lambda r: r.value % 2 == 0)) == [2, 4]
    assert len(table) == 4


def test_concurrent_inserts_get_unique_ids():
    table: Table[_Row] = Table("rows")
    ids: list[int] = []
    ids_lock = threading.Lock()

    def _worker():
        for _ in range(200):
            row = table.insert(lambda rid: _Row(id=rid))
            with ids_lock:
                ids.append(row.id)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ids) == 1600
    assert len(set(ids)) == 1600
    assert max(ids) == 1600


def test_concurrent_updates_do_not_lose_writes():
    table: Table[_Row] = Table("rows")
    row = table.insert(lambda rid: _Row(id=rid))

    def _worker():
        for _ in range(500):
            table.update(row.id, lambda r: replace(r, value=r.value + 1))

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert table.get(row.id).value == 2000


def test_each_content_kind_has_its_own_id_sequence():
    store = EntityStore()
    cards = store.content_table(ContentKind.QUICK_ACCESS)
    announcements = store.content_table(ContentKind.ANNOUNCEMENTS)
    assert cards is store.quick_access_cards
    assert announcements is store.announcements
    assert store.content_table(ContentKind.RESOURCES) is store.resources

    cards.next_id()
    cards.next_id()
    assert announcements.next_id() == 1
