"""Error kinds raised by the dashboard services.

Each kind subclasses the builtin the rest of the code base already catches
for the same situation (`ValueError` for bad input, `LookupError` for missing
rows, `PermissionError` for denials), so callers may handle either. The
first argument is always a short snake_case code used as response detail.
`Unauthorized` is not a `PermissionError`: a missing principal
must never be handled as a denial.
"""

from __future__ import annotations


class Unauthorized(Exception):
    """No principal is attached to the request."""

    kind = "unauthenticated"

    def __init__(self, code: str = "unauthenticated") -> None:
        super().__init__(code)
        self.code = code


class Forbidden(PermissionError):
    """A principal is present but lacks the permission for the year/action."""

    kind = "forbidden"

    def __init__(self, code: str = "forbidden") -> None:
        super().__init__(code)
        self.code = code


class BadRequest(ValueError):
    """Malformed year or payload."""

    kind = "bad_request"

    def __init__(self, code: str = "bad_request") -> None:
        super().__init__(code)
        self.code = code


class NotFound(LookupError):
    """The referenced entity id does not exist."""

    kind = "not_found"

    def __init__(self, code: str = "not_found") -> None:
        super().__init__(code)
        self.code = code


__all__ = ["Unauthorized", "Forbidden", "BadRequest", "NotFound"]
