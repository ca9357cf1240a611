"""
Dashboard read routes: year-scoped lists of cards, announcements, resources.

Why:
    Students load their cohort dashboard via one endpoint per content kind.
    The adapter only resolves the principal and path parameters; all view
    rules live in the content service and the access policy.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from yearboard.dashboard.entities import serialize_item
from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.dashboard.services.content import ContentService
from yearboard.web.auth_utils import current_principal
from yearboard.web.responses import error_response, json_private
from yearboard.web.routes.params import parse_year_param, resolve_kind

dashboard_router = APIRouter(tags=["Dashboard"])


@dashboard_router.get("/api/dashboard/{year}/{kind}")
async def list_dashboard_content(request: Request, year: str, kind: str):
    """List one content kind for a year.

    Behavior:
        - 200 with the items (cards by `order`, announcements/resources newest first)
        - 400 `invalid_year` for anything but 1, 2 or 3 (checked before permissions)
        - 401 without a session
        - 403 when the caller has no view rights for the year
        - 404 for an unknown content kind

    Permissions:
        Admins, or users whose `can_access_years` contains the year.
    """
    try:
        principal = current_principal(request)
        if principal is None:
            raise Unauthorized()
        service = ContentService(request.app.state.store, resolve_kind(kind))
        items = service.list_by_year(principal, parse_year_param(year))
    except (BadRequest, Unauthorized, Forbidden, NotFound) as exc:
        return error_response(exc)
    return json_private([serialize_item(i) for i in items])
