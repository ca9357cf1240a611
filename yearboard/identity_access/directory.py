"""
User directory over the entity store.

Why:
    Registration, credential checks and admin-side permission management need
    one owner so uniqueness rules and defaults (new students: year 1, access
    {1}, no edit rights) are applied consistently.

Security:
    - Passwords are hashed with bcrypt; hashes never leave this module's
      callers in serialized form (see `User.public_dict`).
    - Do not log passwords, hashes or session ids.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from yearboard.dashboard import policy
from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.dashboard.store import EntityStore
from yearboard.identity_access.domain import ALLOWED_ROLES, USER_YEARS, User, YearSet
from yearboard.identity_access.passwords import PasswordHasher

logger = logging.getLogger("yearboard.identity_access")

_UPDATABLE_FIELDS = frozenset({"role", "year", "can_access_years", "can_edit_years"})


def _required_text(value: object, code: str, *, min_len: int = 1, max_len: int = 200) -> str:
    if not isinstance(value, str):
        raise BadRequest(code)
    trimmed = value.strip()
    if len(trimmed) < min_len or len(trimmed) > max_len:
        raise BadRequest(code)
    return trimmed


def _normalize_email(value: object) -> str:
    email = _required_text(value, "invalid_email", min_len=3, max_len=254)
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain:
        raise BadRequest("invalid_email")
    return email


def _normalize_role(value: object) -> str:
    if not isinstance(value, str) or value not in ALLOWED_ROLES:
        raise BadRequest("invalid_role")
    return value


def _normalize_user_year(value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value not in USER_YEARS:
        raise BadRequest("invalid_year")
    return value


def _check_role_year(role: str, year: int) -> None:
    # Admins carry year 0; students belong to a cohort 1..4
    if (role == policy.ADMIN_ROLE) != (year == 0):
        raise BadRequest("role_year_mismatch")


def _normalize_year_set(value: object, code: str) -> YearSet:
    if isinstance(value, YearSet):
        return value
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise BadRequest(code)
    try:
        return YearSet(value)
    except ValueError as exc:
        raise BadRequest(code) from exc


@dataclass
class UserDirectory:
    store: EntityStore
    hasher: PasswordHasher

    def get(self, user_id: int) -> Optional[User]:
        return self.store.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        matches = self.store.users.list(lambda u: u.username == username)
        return matches[0] if matches else None

    def list_users(self, principal: Optional[User]) -> List[User]:
        """All users by id; admin only."""
        if principal is None:
            raise Unauthorized()
        if not policy.can_manage_users(principal):
            raise Forbidden("admin_required")
        return sorted(self.store.users.list(), key=lambda u: u.id)

    def create_user(
        self,
        *,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        email: str,
        role: str = "student",
        year: int = 1,
        can_access_years: object = (1,),
        can_edit_years: object = (),
    ) -> User:
        """Create a user after validating every field and uniqueness.

        Raises BadRequest with `username_taken` / `email_taken` on conflicts.
        """
        uname = _required_text(username, "invalid_username", min_len=3, max_len=64)
        if not isinstance(password, str) or len(password) < 6:
            raise BadRequest("invalid_password")
        first = _required_text(first_name, "invalid_first_name")
        last = _required_text(last_name, "invalid_last_name")
        mail = _normalize_email(email)
        role_v = _normalize_role(role)
        year_v = _normalize_user_year(year)
        _check_role_year(role_v, year_v)
        access = _normalize_year_set(can_access_years, "invalid_can_access_years")
        edit = _normalize_year_set(can_edit_years, "invalid_can_edit_years")
        password_hash = self.hasher.hash(password)

        table = self.store.users
        with table.lock:
            for existing in table.list():
                if existing.username == uname:
                    raise BadRequest("username_taken")
                if existing.email.lower() == mail.lower():
                    raise BadRequest("email_taken")
            user = table.insert(
                lambda new_id: User(
                    id=new_id,
                    username=uname,
                    password_hash=password_hash,
                    first_name=first,
                    last_name=last,
                    email=mail,
                    role=role_v,
                    year=year_v,
                    can_access_years=access,
                    can_edit_years=edit,
                )
            )
        logger.info("user created id=%s role=%s year=%s", user.id, user.role, user.year)
        return user

    def register(self, *, username: str, password: str, first_name: str, last_name: str, email: str) -> User:
        """Self-service sign-up: always a year-1 student with access to year 1 only."""
        return self.create_user(
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role="student",
            year=1,
            can_access_years=[1],
            can_edit_years=[],
        )

    def authenticate(self, username: str, password: str) -> Optional[User]:
        if not isinstance(username, str) or not isinstance(password, str):
            return None
        user = self.get_by_username(username.strip())
        if user is None:
            return None
        if not self.hasher.verify(password, user.password_hash):
            return None
        return user

    def update_user(self, principal: Optional[User], user_id: int, changes: object) -> User:
        """Admin-only update of role, year and permission sets."""
        if principal is None:
            raise Unauthorized()
        if not policy.can_manage_users(principal):
            raise Forbidden("admin_required")
        if not isinstance(changes, Mapping):
            raise BadRequest("invalid_payload")
        if not changes:
            raise BadRequest("empty_payload")
        values: Dict[str, Any] = {}
        for key, value in changes.items():
            if key not in _UPDATABLE_FIELDS:
                raise BadRequest("invalid_field")
            if key == "role":
                values["role"] = _normalize_role(value)
            elif key == "year":
                values["year"] = _normalize_user_year(value)
            else:
                values[key] = _normalize_year_set(value, f"invalid_{key}")

        def _apply(current: User) -> User:
            merged = replace(current, **values)
            _check_role_year(merged.role, merged.year)
            return merged

        updated = self.store.users.update(user_id, _apply)
        if updated is None:
            raise NotFound("user_not_found")
        logger.info("user updated id=%s by=%s fields=%s", user_id, principal.id, ",".join(sorted(values)))
        return updated


__all__ = ["UserDirectory"]
