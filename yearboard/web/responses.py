"""JSON response helpers shared by all routers.

Every dashboard response is user- and year-scoped, so all of them carry
`Cache-Control: private, no-store`.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi.responses import JSONResponse

from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized

PRIVATE_HEADERS = {"Cache-Control": "private, no-store"}

_STATUS_BY_KIND = {
    BadRequest: 400,
    Unauthorized: 401,
    Forbidden: 403,
    NotFound: 404,
}


def json_private(payload: Any, *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code, headers=dict(PRIVATE_HEADERS))


def private_error(error: str, detail: Optional[str] = None, *, status_code: int) -> JSONResponse:
    body = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(content=body, status_code=status_code, headers=dict(PRIVATE_HEADERS))


def error_response(exc: BadRequest | Unauthorized | Forbidden | NotFound) -> JSONResponse:
    """Map a service error kind to its HTTP status (the only place that does)."""
    status_code = next(code for kind, code in _STATUS_BY_KIND.items() if isinstance(exc, kind))
    detail = exc.code if exc.code != exc.kind else None
    return private_error(exc.kind, detail, status_code=status_code)
