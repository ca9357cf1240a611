"""
Identity domain: roles, content years and the principal record.

Why:
- Centralize allowed roles and content years so the policy engine, the
  directory and the web layer never drift apart.
- Model permission sets as a validated value type instead of loose lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

# Keep roles minimal and explicit. Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset({"student", "admin"})

# Content scopes (cohort dashboards). A user's own `year` may also be 0 (admin)
# or 4 (final year, no dashboard of its own).
CONTENT_YEARS = frozenset({1, 2, 3})
USER_YEARS = frozenset({0, 1, 2, 3, 4})


def _is_year_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class YearSet:
    """Immutable set of content years, validated to contain only 1..3.

    Construction from anything else (other integers, bools, strings) raises
    ``ValueError("invalid_year_set")``.
    """

    __slots__ = ("_years",)

    def __init__(self, years: Iterable[object] = ()) -> None:
        if isinstance(years, (str, bytes)):
            raise ValueError("invalid_year_set")
        try:
            items = list(years)
        except TypeError as exc:
            raise ValueError("invalid_year_set") from exc
        for year in items:
            if not _is_year_int(year) or year not in CONTENT_YEARS:
                raise ValueError("invalid_year_set")
        self._years: frozenset[int] = frozenset(items)  # type: ignore[arg-type]

    @classmethod
    def all(cls) -> "YearSet":
        return cls(CONTENT_YEARS)

    def __contains__(self, year: object) -> bool:
        return year in self._years

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._years))

    def __len__(self) -> int:
        return len(self._years)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, YearSet):
            return self._years == other._years
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._years)

    def __repr__(self) -> str:
        return f"YearSet({self.to_list()!r})"

    def union(self, other: Iterable[object]) -> "YearSet":
        other_set = other if isinstance(other, YearSet) else YearSet(other)
        return YearSet(self._years | other_set._years)

    __or__ = union

    def to_list(self) -> list[int]:
        return sorted(self._years)


@dataclass
class User:
    """Authenticated principal.

    `can_access_years` and `can_edit_years` are independent: neither implies
    the other. The admin override is applied by the policy engine only.
    """

    id: int
    username: str
    password_hash: str
    first_name: str
    last_name: str
    email: str
    role: str = "student"
    year: int = 1
    can_access_years: YearSet = field(default_factory=lambda: YearSet([1]))
    can_edit_years: YearSet = field(default_factory=YearSet)

    def public_dict(self) -> dict:
        """Serializable view without credentials."""
        return {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "year": self.year,
            "can_access_years": self.can_access_years.to_list(),
            "can_edit_years": self.can_edit_years.to_list(),
        }


__all__ = ["ALLOWED_ROLES", "CONTENT_YEARS", "USER_YEARS", "YearSet", "User"]
