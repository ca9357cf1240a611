"""
Users (admin) API routes: list users and manage their year permissions.

Why:
    Admins promote students and grant mentors edit rights for other years
    (e.g. a final-year student editing the year-3 dashboard). Access and edit
    sets are updated independently.
"""
from __future__ import annotations

from fastapi import APIRouter, Request

from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.identity_access.directory import UserDirectory
from yearboard.web.auth_utils import current_principal
from yearboard.web.responses import error_response, json_private
from yearboard.web.routes.params import parse_id_param, read_json_body
from yearboard.web.routes.security import csrf_guard

users_router = APIRouter(tags=["Users"])

_ERRORS = (BadRequest, Unauthorized, Forbidden, NotFound)


@users_router.get("/api/admin/users")
async def users_list(request: Request):
    """List all users without credentials (admins only)."""
    directory: UserDirectory = request.app.state.directory
    try:
        users = directory.list_users(current_principal(request))
    except _ERRORS as exc:
        return error_response(exc)
    return json_private([u.public_dict() for u in users])


@users_router.patch("/api/admin/users/{user_id}")
async def users_update(request: Request, user_id: str):
    """Update `role`, `year`, `can_access_years` and/or `can_edit_years`.

    Behavior:
        - 200 with the updated user
        - 400 on unknown fields or invalid values (years outside 1..3 in sets)
        - 401 without session, 403 for non-admins, 404 for unknown users
    """
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    directory: UserDirectory = request.app.state.directory
    try:
        principal = current_principal(request)
        if principal is None:
            raise Unauthorized()
        target = parse_id_param(user_id)
        changes = await read_json_body(request)
        user = directory.update_user(principal, target, changes)
    except _ERRORS as exc:
        return error_response(exc)
    return json_private(user.public_dict())
