"""
In-memory session store.

Why: Cookies carry only an opaque session id; the mapping to a user id stays
server-side. Sessions live as long as the process (no durable state); expired
records are dropped on read and pruned whenever a new session is created.

Security: Session ids come from `secrets.token_urlsafe` and are never logged.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import secrets
import threading
import time


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    user_id: int
    expires_at: Optional[int] = None


class SessionStore:
    def __init__(self, ttl_seconds: int = 86400):
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def create(self, *, user_id: int, ttl_seconds: Optional[int] = None) -> SessionRecord:
        sid = secrets.token_urlsafe(24)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        rec = SessionRecord(session_id=sid, user_id=user_id, expires_at=_now() + ttl)
        with self._lock:
            self._prune_expired_locked()
            self._data[sid] = rec
        return rec

    def _prune_expired_locked(self) -> None:
        now = _now()
        expired = [sid for sid, rec in self._data.items() if rec.expires_at is not None and rec.expires_at < now]
        for sid in expired:
            del self._data[sid]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            rec = self._data.get(session_id)
            if not rec:
                return None
            if rec.expires_at is not None and rec.expires_at < _now():
                self._data.pop(session_id, None)
                return None
            return rec

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._data.pop(session_id, None)

