"""
Content management routes: create, read, update and delete dashboard items.

Why:
    Editors (admins and users holding edit rights for a year) maintain the
    cards, announcements and resources of that year. The adapter enforces
    same-origin for writes and maps service errors to HTTP; the decision who
    may edit which year is made by the content service only.

Notes:
    - Bodies are read as raw JSON and validated by the service so that every
      validation failure is a 400 with a field-specific `detail`.
    - Update re-authorizes against the item's current year and, when the
      payload moves the item, against the target year as well.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from yearboard.dashboard.entities import serialize_item
from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.dashboard.services.content import ContentService
from yearboard.identity_access.domain import User
from yearboard.web.auth_utils import current_principal
from yearboard.web.responses import error_response, json_private
from yearboard.web.routes.params import parse_id_param, parse_year_param, read_json_body, resolve_kind
from yearboard.web.routes.security import csrf_guard

content_router = APIRouter(tags=["Content"])

_ERRORS = (BadRequest, Unauthorized, Forbidden, NotFound)


def _service(request: Request, kind: str) -> ContentService:
    return ContentService(request.app.state.store, resolve_kind(kind))


def _require_principal(request: Request) -> User:
    principal = current_principal(request)
    if principal is None:
        raise Unauthorized()
    return principal


@content_router.post("/api/content/{year}/{kind}")
async def create_content(request: Request, year: str, kind: str):
    """Create an item in a year.

    Behavior:
        - 201 with the created item (id assigned; announcements/resources also
          get `created_at` and `created_by`)
        - 400 on invalid year or payload, 401 without session, 403 without
          edit rights for the year, 404 for an unknown kind

    Permissions:
        Admins, or users whose `can_edit_years` contains the year.
    """
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    try:
        principal = _require_principal(request)
        service = _service(request, kind)
        parsed_year = parse_year_param(year)
        payload = await read_json_body(request)
        item = service.create(principal, parsed_year, payload)
    except _ERRORS as exc:
        return error_response(exc)
    return json_private(serialize_item(item), status_code=201)


@content_router.get("/api/content/{kind}/{item_id}")
async def get_content(request: Request, kind: str, item_id: str):
    """Fetch a single item (view rights on its year)."""
    try:
        principal = _require_principal(request)
        item = _service(request, kind).get(principal, parse_id_param(item_id))
    except _ERRORS as exc:
        return error_response(exc)
    return json_private(serialize_item(item))


@content_router.put("/api/content/{kind}/{item_id}")
async def update_content(request: Request, kind: str, item_id: str):
    """Partially update an item.

    Behavior:
        - 200 with the merged item
        - 400 on invalid fields, empty payload or invalid target year
        - 403 without edit rights for the current or the target year
        - 404 when the item does not exist
    """
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    try:
        principal = _require_principal(request)
        service = _service(request, kind)
        rid = parse_id_param(item_id)
        payload = await read_json_body(request)
        item = service.update(principal, rid, payload)
    except _ERRORS as exc:
        return error_response(exc)
    return json_private(serialize_item(item))


@content_router.delete("/api/content/{kind}/{item_id}")
async def delete_content(request: Request, kind: str, item_id: str):
    """Delete an item; a repeated delete of the same id answers 404."""
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    try:
        principal = _require_principal(request)
        _service(request, kind).delete(principal, parse_id_param(item_id))
    except _ERRORS as exc:
        return error_response(exc)
    return json_private({"success": True})
