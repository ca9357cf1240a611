"""Dashboard content service layer (Clean Architecture boundary).

Why:
    Encapsulates the list/get/create/update/delete use cases for quick-access
    cards, announcements and resources so that web adapters stay thin and the
    authorization rules can be unit-tested without FastAPI.

Order of checks (every operation):
    1. missing principal          -> Unauthorized
    2. invalid year (list/create) -> BadRequest, before any permission check
    3. unknown id (get/update/delete) -> NotFound
    4. policy decision             -> Forbidden
    5. payload validation          -> BadRequest
    6. year move on update         -> BadRequest (invalid) / Forbidden (no edit rights)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from yearboard.dashboard import policy
from yearboard.dashboard.entities import (
    ANNOUNCEMENT_TYPES,
    Announcement,
    ContentItem,
    ContentKind,
    QuickAccessCard,
    Resource,
)
from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.dashboard.store import EntityStore
from yearboard.identity_access.domain import User

logger = logging.getLogger("yearboard.dashboard.content")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Field normalisation -----------------------------------------------------------


def _text(value: object, code: str, *, min_len: int = 1, max_len: int) -> str:
    if not isinstance(value, str):
        raise BadRequest(code)
    trimmed = value.strip()
    if len(trimmed) < min_len or len(trimmed) > max_len:
        raise BadRequest(code)
    return trimmed


def _order(value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise BadRequest("invalid_order")
    if value < 0:
        raise BadRequest("invalid_order")
    return value


def _announcement_type(value: object) -> str:
    if not isinstance(value, str) or value not in ANNOUNCEMENT_TYPES:
        raise BadRequest("invalid_type")
    return value


def _year(value: object) -> int:
    if not policy.year_is_valid(value):
        raise BadRequest("invalid_year")
    return value  # type: ignore[return-value]


_CARD_FIELDS: Dict[str, Callable[[object], Any]] = {
    "title": lambda v: _text(v, "invalid_title", max_len=200),
    "description": lambda v: _text(v, "invalid_description", max_len=500),
    "icon": lambda v: _text(v, "invalid_icon", max_len=64),
    "link": lambda v: _text(v, "invalid_link", max_len=500),
    "order": _order,
}

_ANNOUNCEMENT_FIELDS: Dict[str, Callable[[object], Any]] = {
    "title": lambda v: _text(v, "invalid_title", min_len=3, max_len=200),
    "content": lambda v: _text(v, "invalid_content", min_len=10, max_len=5000),
    "type": _announcement_type,
}

_RESOURCE_FIELDS: Dict[str, Callable[[object], Any]] = {
    "title": lambda v: _text(v, "invalid_title", min_len=3, max_len=200),
    "description": lambda v: _text(v, "invalid_description", min_len=10, max_len=1000),
    "icon": lambda v: _text(v, "invalid_icon", max_len=64),
    "link": lambda v: _text(v, "invalid_link", max_len=500),
}


@dataclass(frozen=True)
class _KindRules:
    noun: str
    fields: Dict[str, Callable[[object], Any]]
    defaults: Dict[str, Any] = field(default_factory=dict)
    newest_first: bool = True


_RULES: Dict[ContentKind, _KindRules] = {
    ContentKind.QUICK_ACCESS: _KindRules(noun="card", fields=_CARD_FIELDS, newest_first=False),
    ContentKind.ANNOUNCEMENTS: _KindRules(
        noun="announcement", fields=_ANNOUNCEMENT_FIELDS, defaults={"type": "info"}
    ),
    ContentKind.RESOURCES: _KindRules(noun="resource", fields=_RESOURCE_FIELDS),
}


def _as_mapping(payload: object) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise BadRequest("invalid_payload")
    return payload


def normalize_create(kind: ContentKind, payload: object) -> Dict[str, Any]:
    """Validate a create payload. A `year` key is ignored (the path wins)."""
    rules = _RULES[kind]
    data = _as_mapping(payload)
    for key in data:
        if key != "year" and key not in rules.fields:
            raise BadRequest("invalid_field")
    values: Dict[str, Any] = {}
    for name, normalize in rules.fields.items():
        if name in data:
            values[name] = normalize(data[name])
        elif name in rules.defaults:
            values[name] = rules.defaults[name]
        else:
            raise BadRequest(f"invalid_{name}")
    return values


def normalize_update(kind: ContentKind, payload: object) -> Dict[str, Any]:
    """Validate a partial update. Only editable fields and `year` are accepted."""
    rules = _RULES[kind]
    data = _as_mapping(payload)
    if not data:
        raise BadRequest("empty_payload")
    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "year":
            changes["year"] = _year(value)
        elif key in rules.fields:
            changes[key] = rules.fields[key](value)
        else:
            raise BadRequest("invalid_field")
    return changes


# --- Service -------------------------------------------------------------------------


@dataclass
class ContentService:
    """Use cases for one content kind (framework-independent)."""

    store: EntityStore
    kind: ContentKind
    now: Callable[[], datetime] = _utcnow

    @property
    def _rules(self) -> _KindRules:
        return _RULES[self.kind]

    def _table(self):
        return self.store.content_table(self.kind)

    def _not_found(self) -> NotFound:
        return NotFound(f"{self._rules.noun}_not_found")

    @staticmethod
    def _require_principal(principal: Optional[User]) -> User:
        if principal is None:
            raise Unauthorized()
        return principal

    def _sorted(self, items: List[ContentItem]) -> List[ContentItem]:
        if self._rules.newest_first:
            return sorted(items, key=lambda i: (i.created_at, i.id), reverse=True)  # type: ignore[union-attr]
        return sorted(items, key=lambda i: (i.order, i.id))  # type: ignore[union-attr]

    def list_by_year(self, principal: Optional[User], year: object) -> List[ContentItem]:
        user = self._require_principal(principal)
        if not policy.year_is_valid(year):
            raise BadRequest("invalid_year")
        if not policy.can_view(user, year):
            logger.info("view denied kind=%s year=%s user=%s", self.kind.value, year, user.id)
            raise Forbidden("year_forbidden")
        return self._sorted(self._table().list(lambda item: item.year == year))

    def get(self, principal: Optional[User], item_id: int) -> ContentItem:
        user = self._require_principal(principal)
        item = self._table().get(item_id)
        if item is None:
            raise self._not_found()
        if not policy.can_view(user, item.year):
            raise Forbidden("year_forbidden")
        return item

    def create(self, principal: Optional[User], year: object, payload: object) -> ContentItem:
        user = self._require_principal(principal)
        if not policy.year_is_valid(year):
            raise BadRequest("invalid_year")
        if not policy.can_edit(user, year):
            logger.info("edit denied kind=%s year=%s user=%s", self.kind.value, year, user.id)
            raise Forbidden("year_forbidden")
        values = normalize_create(self.kind, payload)
        item = self._table().insert(lambda new_id: self._build(new_id, year, values, user))  # type: ignore[arg-type]
        logger.info("content created kind=%s id=%s year=%s by=%s", self.kind.value, item.id, year, user.id)
        return item

    def _build(self, new_id: int, year: int, values: Dict[str, Any], user: User) -> ContentItem:
        if self.kind is ContentKind.QUICK_ACCESS:
            return QuickAccessCard(id=new_id, year=year, **values)
        created = {"created_at": self.now(), "created_by": user.id}
        if self.kind is ContentKind.ANNOUNCEMENTS:
            return Announcement(id=new_id, year=year, **values, **created)
        return Resource(id=new_id, year=year, **values, **created)

    def update(self, principal: Optional[User], item_id: int, payload: object) -> ContentItem:
        """Merge `payload` into the item; re-check edit rights when the year moves.

        The check and the merge run under the table lock, so the permission
        decision always refers to the row that is actually written.
        """
        user = self._require_principal(principal)

        def _apply(existing: ContentItem) -> ContentItem:
            if not policy.can_edit(user, existing.year):
                raise Forbidden("year_forbidden")
            changes = normalize_update(self.kind, payload)
            target_year = changes.get("year", existing.year)
            if target_year != existing.year and not policy.can_edit(user, target_year):
                raise Forbidden("target_year_forbidden")
            return replace(existing, **changes)

        try:
            updated = self._table().update(item_id, _apply)
        except Forbidden as exc:
            logger.info("update denied kind=%s id=%s user=%s code=%s", self.kind.value, item_id, user.id, exc.code)
            raise
        if updated is None:
            raise self._not_found()
        logger.info("content updated kind=%s id=%s year=%s by=%s", self.kind.value, item_id, updated.year, user.id)
        return updated

    def delete(self, principal: Optional[User], item_id: int) -> None:
        user = self._require_principal(principal)
        table = self._table()
        with table.lock:
            existing = table.get(item_id)
            if existing is None:
                raise self._not_found()
            if not policy.can_edit(user, existing.year):
                logger.info("delete denied kind=%s id=%s user=%s", self.kind.value, item_id, user.id)
                raise Forbidden("year_forbidden")
            table.remove(item_id)
        logger.info("content deleted kind=%s id=%s year=%s by=%s", self.kind.value, item_id, existing.year, user.id)


__all__ = ["ContentService", "normalize_create", "normalize_update"]
