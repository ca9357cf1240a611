"""
Shared web security helpers (CSRF same-origin checks for write routes).

Keeping a single implementation for the content, auth and admin routers
avoids security drift between them.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from fastapi import Request
from fastapi.responses import JSONResponse

from yearboard.web.responses import private_error


def _parse_origin(url: str) -> tuple[str, str, int]:
    p = urlparse(url)
    if not p.scheme or not p.hostname:
        raise ValueError("invalid_origin")
    scheme = p.scheme.lower()
    host = p.hostname.lower()
    port = p.port if p.port is not None else (443 if scheme == "https" else 80)
    return scheme, host, int(port)


def _parse_server(request: Request, *, trust_proxy: bool) -> tuple[str, str, int]:
    if trust_proxy:
        xf_proto = (request.headers.get("x-forwarded-proto") or request.url.scheme or "").split(",")[0].strip()
        xf_host = (request.headers.get("x-forwarded-host") or request.headers.get("host") or "").split(",")[0].strip()
        scheme = (xf_proto or request.url.scheme or "http").lower()
        default_port = 443 if scheme == "https" else 80
        if ":" in xf_host:
            host_only, port_str = xf_host.rsplit(":", 1)
            host = host_only.lower()
            port = int(port_str) if port_str.isdigit() else default_port
        else:
            host = (xf_host or (request.url.hostname or "")).lower()
            port = int(request.url.port) if request.url.port else default_port
        xf_port = (request.headers.get("x-forwarded-port") or "").split(",")[0].strip()
        if xf_port:
            port = int(xf_port) if xf_port.isdigit() else default_port
        return scheme, host, port

    scheme = (request.url.scheme or "http").lower()
    host = (request.url.hostname or "").lower()
    port = int(request.url.port) if request.url.port else (443 if scheme == "https" else 80)
    return scheme, host, port


def is_same_origin(request: Request, *, trust_proxy: bool = False) -> bool:
    """Verify same-origin using Origin or Referer headers.

    Behavior:
    - If Origin is present, require exact scheme/host/port match with server.
    - Else if Referer is present, validate its origin similarly.
    - Else (no headers): allow, to not break non-browser clients.
    Proxy awareness: X-Forwarded-* is only honoured when `trust_proxy` is set.
    """
    header = request.headers.get("origin") or request.headers.get("referer")
    if not header:
        return True
    try:
        return _parse_origin(header) == _parse_server(request, trust_proxy=trust_proxy)
    except ValueError:
        return False


def csrf_guard(request: Request) -> Optional[JSONResponse]:
    """Enforce same-origin for browser write requests.

    In prod-like environments or with STRICT_CSRF_WRITES=true, Origin or
    Referer must be present as well; a missing header is a violation.
    """
    settings = request.app.state.settings
    strict = settings.is_prod_like or settings.strict_csrf_writes
    if strict and not (request.headers.get("origin") or request.headers.get("referer")):
        return private_error("forbidden", "csrf_violation", status_code=403)
    if not is_same_origin(request, trust_proxy=settings.trust_proxy):
        return private_error("forbidden", "csrf_violation", status_code=403)
    return None
