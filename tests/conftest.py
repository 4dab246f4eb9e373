
# tests/conftest.py

import uuid
from dataclasses import dataclass
from typing import Dict
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.notifications.mock import MockDispatcher
from deps.store import get_dispatcher, get_store
from fakes import InMemoryRecordStore
from main import create_app
from security import create_access_token


@dataclass
class AuthedUser:
    user_id: UUID
    token: str


@dataclass
class SeededArtist:
    artist_id: UUID
    owner: AuthedUser


# ---------------------------
# Client + Auth Helpers
# ---------------------------

def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _new_user() -> AuthedUser:
    user_id = uuid.uuid4()
    return AuthedUser(user_id=user_id, token=create_access_token(str(user_id)))


@pytest.fixture()
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture()
def dispatcher() -> MockDispatcher:
    return MockDispatcher()


@pytest.fixture()
def client(store: InMemoryRecordStore, dispatcher: MockDispatcher) -> TestClient:
    app = create_app()

    def _store_override():
        # same commit/rollback contract as db.get_conn()
        with store.transaction():
            yield store

    app.dependency_overrides[get_store] = _store_override
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    # Needed so tests can assert 500s instead of pytest re-raising server exceptions
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def admin_user(store: InMemoryRecordStore) -> AuthedUser:
    user = _new_user()
    store.add_admin(user.user_id)
    return user


@pytest.fixture()
def artist(store: InMemoryRecordStore) -> SeededArtist:
    owner = _new_user()
    artist_id = store.add_artist(
        name="Burna Test",
        email="burna@example.com",
        available_balance="500.00",
        credit_balance="0.00",
        user_id=owner.user_id,
    )
    return SeededArtist(artist_id=artist_id, owner=owner)


@pytest.fixture()
def outsider() -> AuthedUser:
    return _new_user()
