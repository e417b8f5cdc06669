"""
tests/conftest.py -- shared fixtures.

Every test gets a fresh application over its own in-memory SQLite database
(storage.reload() disposes the previous engine). The in-memory engine uses a
StaticPool so the test thread and Flask's request handling share one DB.

APP_ENV must be set before api/ is imported so the .env defaults of a
developer machine never leak into the suite.
"""
from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

import pytest

from api import create_app
from models import storage as _storage
from tests.helpers import PASSWORD


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    app.extensions["auth_service"].close()
    _storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return _storage


@pytest.fixture
def auth_service(app):
    return app.extensions["auth_service"]


@pytest.fixture
def secret(app) -> str:
    return app.config["JWT_SECRET"]


@pytest.fixture
def user(auth_service):
    """A registered user a@b.com / secret123."""
    return auth_service.register("a@b.com", PASSWORD)


@pytest.fixture
def other_user(auth_service):
    return auth_service.register("other@b.com", PASSWORD)
