"""
Configuration and startup security checks for Yearboard.

Why: Demo seed data ships well-known passwords. This module keeps every
environment knob in one place and refuses obviously insecure production
deployments without burdening local development.

Permissions: The caller needs no special privileges. Functions read
environment variables and raise `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _flag(env: Mapping[str, str], name: str, default: str) -> bool:
    return (env.get(name, default) or "").strip().lower() in ("1", "true", "yes")


def _int(env: Mapping[str, str], name: str, default: int, *, low: int, high: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise SystemExit(f"Refusing to start: {name} must be an integer (got {raw!r}).")
    if value < low or value > high:
        raise SystemExit(f"Refusing to start: {name} must be between {low} and {high} (got {value}).")
    return value


def parse_allowed_registration_domains(raw: str | None) -> frozenset[str]:
    """Parse ALLOWED_REGISTRATION_DOMAINS into a normalized set like {"@college.edu"}.

    Empty entries are ignored; a missing leading "@" is added.
    """
    if not raw:
        return frozenset()
    items = set()
    for part in str(raw).split(","):
        item = part.strip().lower()
        if not item:
            continue
        items.add(item if item.startswith("@") else f"@{item}")
    return frozenset(items)


@dataclass(frozen=True)
class Settings:
    environment: str = "dev"
    seed_demo: bool = True
    session_ttl_seconds: int = 86400
    bcrypt_rounds: int = 12
    trust_proxy: bool = False
    strict_csrf_writes: bool = False
    allowed_registration_domains: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_prod_like(self) -> bool:
        return _is_prod_like(self.environment)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build `Settings` from the environment (or an explicit mapping in tests)."""
    source = os.environ if env is None else env
    return Settings(
        environment=(source.get("YEARBOARD_ENV", "dev") or "dev").strip().lower(),
        seed_demo=_flag(source, "YEARBOARD_SEED_DEMO", "true"),
        session_ttl_seconds=_int(source, "YEARBOARD_SESSION_TTL_SECONDS", 86400, low=60, high=30 * 86400),
        bcrypt_rounds=_int(source, "YEARBOARD_BCRYPT_ROUNDS", 12, low=4, high=16),
        trust_proxy=_flag(source, "YEARBOARD_TRUST_PROXY", "false"),
        strict_csrf_writes=_flag(source, "STRICT_CSRF_WRITES", "false"),
        allowed_registration_domains=parse_allowed_registration_domains(source.get("ALLOWED_REGISTRATION_DOMAINS")),
    )


def ensure_secure_config_on_startup(settings: Settings) -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only; dev and test remain permissive):
    - Demo seeding must be disabled: the demo accounts use published passwords.
    - bcrypt cost must be at least 10.
    """
    if not settings.is_prod_like:
        return

    if settings.seed_demo:
        raise SystemExit(
            "Refusing to start: YEARBOARD_SEED_DEMO must be false in production (demo accounts use known passwords)."
        )

    if settings.bcrypt_rounds < 10:
        raise SystemExit(
            "Refusing to start: YEARBOARD_BCRYPT_ROUNDS must be at least 10 in production."
        )


__all__ = ["Settings", "load_settings", "ensure_secure_config_on_startup", "parse_allowed_registration_domains"]
