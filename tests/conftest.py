"""Shared fixtures: a freshly seeded store per test and an API client bound to it."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from tourisma_api.app.core.security import create_access_token
from tourisma_api.app.core.store import DataStore, init_store
from tourisma_api.app.main import create_app

FIXED_NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> DataStore:
    return init_store(DataStore(clock=lambda: FIXED_NOW))


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as c:
        yield c


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def client_headers():
    return auth("u1")


@pytest.fixture
def partner_headers():
    return auth("u2")


@pytest.fixture
def admin_headers():
    return auth("u3")
