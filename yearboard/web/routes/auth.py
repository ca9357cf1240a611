"""
Authentication routes: register, login, current user, logout.

Why:
    Keep auth endpoints in a dedicated router. Sessions are server-side; the
    cookie carries only an opaque id (see `auth_utils.cookie_opts`).

Security:
    - Passwords are verified against bcrypt hashes, never compared in plaintext.
    - Login failures answer the same 401 for unknown users and wrong passwords.
    - Registration may be restricted to school e-mail domains via
      ALLOWED_REGISTRATION_DOMAINS.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from yearboard.dashboard.errors import BadRequest
from yearboard.identity_access.directory import UserDirectory
from yearboard.web.auth_utils import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    current_principal,
    set_session_cookie,
)
from yearboard.web.responses import error_response, json_private, private_error
from yearboard.web.routes.params import read_json_body
from yearboard.web.routes.security import csrf_guard

auth_router = APIRouter(tags=["Auth"])
logger = logging.getLogger("yearboard.web.auth")


def _is_allowed_registration_email(email: object, allowed_domains: frozenset[str]) -> bool:
    """Return True if the email's domain is in the allow-list (empty = no restriction)."""
    if not allowed_domains:
        return True
    if not isinstance(email, str):
        return False
    normalized = email.strip().lower()
    if "@" not in normalized:
        return False
    local, domain = normalized.rsplit("@", 1)
    if not local or not domain:
        return False
    return f"@{domain}" in allowed_domains


def _start_session(request: Request, user_id: int, payload: dict, *, status_code: int):
    sessions = request.app.state.sessions
    rec = sessions.create(user_id=user_id)
    response = json_private(payload, status_code=status_code)
    set_session_cookie(response, rec.session_id, max_age=sessions.ttl_seconds)
    return response


@auth_router.post("/api/auth/register")
async def auth_register(request: Request):
    """Self-service sign-up; the new student is logged in immediately.

    Behavior:
        - 201 with the user (year 1, access {1}, no edit rights)
        - 400 on invalid fields, taken username/email or disallowed domain
    """
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    directory: UserDirectory = request.app.state.directory
    try:
        body = await read_json_body(request)
        if not isinstance(body, dict):
            raise BadRequest("invalid_payload")
        allowed = request.app.state.settings.allowed_registration_domains
        if not _is_allowed_registration_email(body.get("email"), allowed):
            raise BadRequest("invalid_email_domain")
        user = directory.register(
            username=body.get("username"),  # type: ignore[arg-type]
            password=body.get("password"),  # type: ignore[arg-type]
            first_name=body.get("first_name"),  # type: ignore[arg-type]
            last_name=body.get("last_name"),  # type: ignore[arg-type]
            email=body.get("email"),  # type: ignore[arg-type]
        )
    except BadRequest as exc:
        return error_response(exc)
    return _start_session(request, user.id, user.public_dict(), status_code=201)


@auth_router.post("/api/auth/login")
async def auth_login(request: Request):
    """Check credentials and open a session (200 with the user, 401 otherwise)."""
    csrf = csrf_guard(request)
    if csrf:
        return csrf
    directory: UserDirectory = request.app.state.directory
    try:
        body = await read_json_body(request)
    except BadRequest as exc:
        return error_response(exc)
    if not isinstance(body, dict):
        return private_error("bad_request", "invalid_payload", status_code=400)
    user = directory.authenticate(body.get("username"), body.get("password"))  # type: ignore[arg-type]
    if user is None:
        logger.warning("Login rejected")
        return private_error("unauthenticated", "invalid_credentials", status_code=401)
    return _start_session(request, user.id, user.public_dict(), status_code=200)


@auth_router.get("/api/auth/me")
async def auth_me(request: Request):
    user = current_principal(request)
    if user is None:
        return private_error("unauthenticated", status_code=401)
    return json_private(user.public_dict())


@auth_router.post("/api/auth/logout")
async def auth_logout(request: Request):
    """Drop the server-side session and clear the cookie (idempotent)."""
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if sid:
        request.app.state.sessions.delete(sid)
    response = json_private({"success": True})
    clear_session_cookie(response)
    return response
