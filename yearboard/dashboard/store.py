"""
In-memory entity store for users and dashboard content.

Why:
    The dashboard needs identity assignment and storage only; policy lives
    elsewhere. One `EntityStore` is built at process start and handed to the
    app factory, so tests can construct isolated stores per case.

Concurrency:
    Each table owns an `RLock`. Id assignment plus insert, remove and
    the read-modify-write `update` all run under it, so concurrent creates
    never share an id and concurrent edits of one row never lose each other.
    Ids are monotonically increasing per table and never reused.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from yearboard.identity_access.domain import User

from .entities import Announcement, ContentKind, QuickAccessCard, Resource

T = TypeVar("T")


class Table(Generic[T]):
    """Rows of one entity kind keyed by an auto-increment integer id."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._rows: Dict[int, T] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def next_id(self) -> int:
        """Reserve and return the next id; reserved ids are never handed out again."""
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            return rid

    def get(self, row_id: int) -> Optional[T]:
        with self._lock:
            return self._rows.get(row_id)

    def list(self, predicate: Optional[Callable[[T], bool]] = None) -> List[T]:
        with self._lock:
            rows = list(self._rows.values())
        if predicate is None:
            return rows
        return [r for r in rows if predicate(r)]

    def insert(self, build: Callable[[int], T]) -> T:
        """Assign a fresh id, build the row with it and store it atomically."""
        with self._lock:
            row = build(self.next_id())
            self._rows[getattr(row, "id")] = row
            return row

    def update(self, row_id: int, mutate: Callable[[T], T]) -> Optional[T]:
        """Apply `mutate` to the current row under the lock and store its result.

        Returns None when the row does not exist. Exceptions raised by
        `mutate` propagate and leave the row unchanged.
        """
        with self._lock:
            current = self._rows.get(row_id)
            if current is None:
                return None
            updated = mutate(current)
            self._rows[row_id] = updated
            return updated

    def remove(self, row_id: int) -> bool:
        with self._lock:
            return self._rows.pop(row_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)


class EntityStore:
    """All tables of one dashboard deployment."""

    def __init__(self) -> None:
        self.users: Table[User] = Table("users")
        self.quick_access_cards: Table[QuickAccessCard] = Table("quick_access_cards")
        self.announcements: Table[Announcement] = Table("announcements")
        self.resources: Table[Resource] = Table("resources")

    def content_table(self, kind: ContentKind) -> Table:
        if kind is ContentKind.QUICK_ACCESS:
            return self.quick_access_cards
        if kind is ContentKind.ANNOUNCEMENTS:
            return self.announcements
        if kind is ContentKind.RESOURCES:
            return self.resources
        raise KeyError(kind)


__all__ = ["Table", "EntityStore"]
