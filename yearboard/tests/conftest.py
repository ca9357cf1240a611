"""
Pytest configuration for yearboard tests.

Why: Force AnyIO to use the asyncio backend and give every test an isolated
entity store, so no state leaks between cases. bcrypt runs at the minimum
cost factor to keep the suite fast.
"""
from __future__ import annotations

from typing import Callable

import pytest

from yearboard.dashboard.store import EntityStore
from yearboard.identity_access.directory import UserDirectory
from yearboard.identity_access.domain import User
from yearboard.identity_access.passwords import PasswordHasher
from yearboard.web.config import Settings
from yearboard.web.main import create_app

BASE_URL = "http://test"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def store() -> EntityStore:
    return EntityStore()


@pytest.fixture
def directory(store: EntityStore, hasher: PasswordHasher) -> UserDirectory:
    return UserDirectory(store=store, hasher=hasher)


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", seed_demo=False, bcrypt_rounds=4)


@pytest.fixture
def app(settings: Settings, store: EntityStore, hasher: PasswordHasher):
    return create_app(settings, store=store, hasher=hasher)


@pytest.fixture
def make_user(directory: UserDirectory) -> Callable[..., User]:
    """Create users with sensible defaults; override any field per call."""
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "username": f"user{n}",
            "password": "password",
            "first_name": "Test",
            "last_name": f"User{n}",
            "email": f"user{n}@college.edu",
            "role": "student",
            "year": 1,
            "can_access_years": [1],
            "can_edit_years": [],
        }
        fields.update(overrides)
        return directory.create_user(**fields)

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user(username="admin", role="admin", year=0, can_access_years=[1, 2, 3], can_edit_years=[1, 2, 3])


@pytest.fixture
def session_for(app) -> Callable[[User], str]:
    """Open a server-side session for a user and return its id."""

    def _open(user: User) -> str:
        return app.state.sessions.create(user_id=user.id).session_id

    return _open
