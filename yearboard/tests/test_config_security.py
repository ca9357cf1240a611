"""
Security config guard tests.

Production-like environments must refuse demo seeding (published passwords)
and weak bcrypt cost factors; development stays permissive.
"""
from __future__ import annotations

import pytest

from yearboard.web.config import (
    Settings,
    ensure_secure_config_on_startup,
    load_settings,
    parse_allowed_registration_domains,
)
from yearboard.web.main import create_app


def test_defaults_for_dev():
    settings = load_settings({})
    assert settings.environment == "dev"
    assert settings.seed_demo is True
    assert settings.session_ttl_seconds == 86400
    assert settings.bcrypt_rounds == 12
    assert settings.is_prod_like is False
    ensure_secure_config_on_startup(settings)


@pytest.mark.parametrize("env_name", ["prod", "production", "stage", "Staging"])
def test_prod_refuses_demo_seed(env_name):
    settings = load_settings({"YEARBOARD_ENV": env_name})
    with pytest.raises(SystemExit):
        ensure_secure_config_on_startup(settings)


def test_prod_refuses_low_bcrypt_rounds():
    settings = load_settings({"YEARBOARD_ENV": "prod", "YEARBOARD_SEED_DEMO": "false", "YEARBOARD_BCRYPT_ROUNDS": "6"})
    with pytest.raises(SystemExit):
        ensure_secure_config_on_startup(settings)


def test_prod_accepts_hardened_settings():
    settings = load_settings({"YEARBOARD_ENV": "prod", "YEARBOARD_SEED_DEMO": "0"})
    ensure_secure_config_on_startup(settings)


def test_create_app_applies_guard():
    with pytest.raises(SystemExit):
        create_app(Settings(environment="production", seed_demo=True))


@pytest.mark.parametrize(
    "name,value",
    [
        ("YEARBOARD_SESSION_TTL_SECONDS", "soon"),
        ("YEARBOARD_SESSION_TTL_SECONDS", "5"),
        ("YEARBOARD_BCRYPT_ROUNDS", "40"),
    ],
)
def test_invalid_integers_abort(name, value):
    with pytest.raises(SystemExit):
        load_settings({name: value})


def test_flags_parse_truthy_values():
    settings = load_settings({"YEARBOARD_TRUST_PROXY": "yes", "STRICT_CSRF_WRITES": "1", "YEARBOARD_SEED_DEMO": "no"})
    assert settings.trust_proxy is True
    assert settings.strict_csrf_writes is True
    assert settings.seed_demo is False


def test_parse_allowed_registration_domains_normalizes():
    assert parse_allowed_registration_domains(" College.edu, @staff.college.edu ,,") == frozenset(
        {"@college.edu", "@staff.college.edu"}
    )
    assert parse_allowed_registration_domains(None) == frozenset()
