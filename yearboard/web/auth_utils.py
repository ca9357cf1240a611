"""
Shared authentication utilities for the web layer.

Why:
    Cookie policy and principal lookup are needed by the middleware and by the
    auth router. Keeping one implementation avoids drift between them.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request, Response

from yearboard.identity_access.domain import User

SESSION_COOKIE_NAME = "yearboard_session"


def cookie_opts() -> dict:
    """Return hardened cookie flags (dev = prod).

    SameSite=Lax keeps the cookie on top-level navigations while blocking it
    on cross-site subrequests; Secure is always on.
    """
    return {"secure": True, "samesite": "lax", "httponly": True, "path": "/"}


def set_session_cookie(response: Response, session_id: str, *, max_age: int) -> None:
    response.set_cookie(key=SESSION_COOKIE_NAME, value=session_id, max_age=max_age, **cookie_opts())


def clear_session_cookie(response: Response) -> None:
    opts = cookie_opts()
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path=opts["path"],
        secure=opts["secure"],
        httponly=opts["httponly"],
        samesite=opts["samesite"],
    )


def current_principal(request: Request) -> Optional[User]:
    """Principal attached by the session middleware, or None."""
    return getattr(request.state, "user", None)
