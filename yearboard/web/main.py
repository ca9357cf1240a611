"""Yearboard web application factory.

Run locally with:

    uvicorn yearboard.web.main:create_app --factory

The entity store, session store and user directory are constructed once per
app and kept on `app.state`; there is no module-level store, so tests build
isolated apps with `create_app(store=EntityStore(), ...)`.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from fastapi import FastAPI, Request

from yearboard.dashboard.seed import seed_demo_content
from yearboard.dashboard.store import EntityStore
from yearboard.identity_access.directory import UserDirectory
from yearboard.identity_access.passwords import PasswordHasher
from yearboard.identity_access.stores import SessionStore
from yearboard.web.auth_utils import SESSION_COOKIE_NAME
from yearboard.web.config import Settings, ensure_secure_config_on_startup, load_settings
from yearboard.web.responses import json_private
from yearboard.web.routes.auth import auth_router
from yearboard.web.routes.content import content_router
from yearboard.web.routes.dashboard import dashboard_router
from yearboard.web.routes.users import users_router

logger = logging.getLogger("yearboard.web")


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via YEARBOARD_ENABLE_DOTENV (default true).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("YEARBOARD_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


def _load_dotenv_if_enabled() -> None:
    if not _should_load_dotenv():
        return
    from dotenv import load_dotenv

    load_dotenv()


def _install_middlewares(app: FastAPI) -> None:
    @app.middleware("http")
    async def resolve_principal(request: Request, call_next):
        """Attach the session's user (or None) as `request.state.user`.

        Rejection of anonymous callers is left to the services, which raise
        Unauthorized before any policy decision.
        """
        request.state.user = None
        sid = request.cookies.get(SESSION_COOKIE_NAME)
        if sid:
            try:
                rec = app.state.sessions.get(sid)
            except Exception as exc:
                logger.warning("Session store get failed: %s", exc.__class__.__name__)
                rec = None
            if rec is not None:
                # A session whose user was removed resolves to no principal
                request.state.user = app.state.directory.get(rec.user_id)
        return await call_next(request)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self' data:; "
            "font-src 'self' data:; connect-src 'self'; frame-ancestors 'self';",
        )
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[EntityStore] = None,
    sessions: Optional[SessionStore] = None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Build the FastAPI app around one explicit entity store.

    Demo content is seeded only when `settings.seed_demo` is set and the
    store was created here (a caller-supplied store is used as-is).
    """
    if settings is None:
        _load_dotenv_if_enabled()
        settings = load_settings()
    ensure_secure_config_on_startup(settings)

    seed = store is None and settings.seed_demo
    store = store if store is not None else EntityStore()
    sessions = sessions if sessions is not None else SessionStore(ttl_seconds=settings.session_ttl_seconds)
    hasher = hasher if hasher is not None else PasswordHasher(rounds=settings.bcrypt_rounds)
    directory = UserDirectory(store=store, hasher=hasher)
    if seed:
        seed_demo_content(store, directory)

    app = FastAPI(title="Yearboard", description="Year-scoped student dashboard", version="0.1.0")
    app.state.settings = settings
    app.state.store = store
    app.state.sessions = sessions
    app.state.directory = directory

    _install_middlewares(app)

    @app.get("/health")
    async def health():
        return json_private({"status": "ok"})

    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(content_router)
    app.include_router(users_router)
    return app


__all__ = ["create_app"]
