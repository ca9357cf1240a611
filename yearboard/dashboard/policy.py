"""
Access policy: pure authorization decisions for year-scoped content.

Why:
    Keep every "who may see / change which year" rule in one place. Routes and
    services ask these functions and translate `False` into an error kind;
    nothing else re-implements the admin override.

Contract:
    All functions are total (never raise, also for `None`), deterministic and
    free of side effects. The admin override is evaluated first, then set
    membership; the boolean result does not depend on that order.
"""

from __future__ import annotations

from typing import Optional

from yearboard.identity_access.domain import CONTENT_YEARS, User

ADMIN_ROLE = "admin"


def year_is_valid(year: object) -> bool:
    """Return True iff `year` is a content year (int 1..3, bools excluded)."""
    if not isinstance(year, int) or isinstance(year, bool):
        return False
    return year in CONTENT_YEARS


def _is_admin(principal: Optional[User]) -> bool:
    return principal is not None and getattr(principal, "role", None) == ADMIN_ROLE


def can_view(principal: Optional[User], year: object) -> bool:
    if principal is None:
        return False
    if _is_admin(principal):
        return True
    try:
        return year in principal.can_access_years
    except TypeError:
        # unhashable year
        return False


def can_edit(principal: Optional[User], year: object) -> bool:
    if principal is None:
        return False
    if _is_admin(principal):
        return True
    try:
        return year in principal.can_edit_years
    except TypeError:
        return False


def can_manage_users(principal: Optional[User]) -> bool:
    return _is_admin(principal)


__all__ = ["year_is_valid", "can_view", "can_edit", "can_manage_users"]
