"""
In-memory session store: expiry on read and pruning of abandoned sessions.
"""
from __future__ import annotations

import pytest

from yearboard.identity_access import stores
from yearboard.identity_access.stores import SessionStore


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch):
    current = {"t": 1_000_000}
    monkeypatch.setattr(stores, "_now", lambda: current["t"])
    return current


def test_expired_session_is_dropped_on_read(clock):
    sessions = SessionStore(ttl_seconds=60)
    rec = sessions.create(user_id=1)
    assert sessions.get(rec.session_id) is rec

    clock["t"] += 61
    assert sessions.get(rec.session_id) is None
    assert len(sessions) == 0


def test_abandoned_sessions_are_pruned_when_a_new_one_is_created(clock):
    sessions = SessionStore(ttl_seconds=60)
    for user_id in range(100):
        sessions.create(user_id=user_id)
    assert len(sessions) == 100

    clock["t"] += 61
    fresh = sessions.create(user_id=999)

    assert len(sessions) == 1
    assert sessions.get(fresh.session_id) is fresh


def test_pruning_keeps_live_sessions(clock):
    sessions = SessionStore(ttl_seconds=60)
    old = sessions.create(user_id=1)
    clock["t"] += 30
    young = sessions.create(user_id=2)
    clock["t"] += 40
    sessions.create(user_id=3)

    assert sessions.get(old.session_id) is None
    assert sessions.get(young.session_id) is young
    assert len(sessions) == 2


def test_delete_is_idempotent():
    sessions = SessionStore()
    rec = sessions.create(user_id=1)
    sessions.delete(rec.session_id)
    sessions.delete(rec.session_id)
    assert sessions.get(rec.session_id) is None
