"""Global pytest configuration and fixtures for the understudy test suite.

Fixtures
--------
- ``engine``
    A fresh :class:`SubstituteEngine` built from default settings, so tests
    never see substitutes created elsewhere.
- ``user_repository``
    A substitute for :class:`tests.fakes.UserRepository` created by ``engine``.
- ``alice`` / ``bob``
    Distinct :class:`tests.fakes.User` entities.

Auto-Use Fixtures
-----------------
- ``_isolate_settings``
    Clears the cached :func:`get_settings` result and any ``UNDERSTUDY_*``
    environment variables around each test.
"""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest

from understudy import EngineSettings, SubstituteEngine, get_settings
from tests.fakes import User, UserRepository


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    for name in list(os.environ):
        if name.startswith("UNDERSTUDY_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine() -> SubstituteEngine:
    return SubstituteEngine(EngineSettings())


@pytest.fixture
def user_repository(engine: SubstituteEngine) -> UserRepository:
    return engine.create(UserRepository)


@pytest.fixture
def alice() -> User:
    return User(user_id=1, email="a@example.com", name="Alice", roles=["admin"])


@pytest.fixture
def bob() -> User:
    return User(user_id=2, email="b@example.com", name="Bob")
