import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.setdefault("SEED_POSTS", "0")

from src.api.auth import StaticTokenAuthenticator, get_authenticator  # noqa: E402
from src.api.main import app  # noqa: E402
from src.api.repositories import InMemoryRepository, get_repository  # noqa: E402

TEST_TOKEN = "test-token"


@pytest.fixture
def repo():
    """A fresh repository per test, wired into the app."""
    repository = InMemoryRepository()
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_authenticator] = lambda: StaticTokenAuthenticator([TEST_TOKEN])
    yield repository
    app.dependency_overrides.clear()


@pytest.fixture
def client(repo):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def sqlite_repo(repo, tmp_path):
    """Swap the in-memory store for a sqlite one in a temp directory."""
    from src.api.db import SQLiteRepository

    repository = SQLiteRepository(str(tmp_path / "posts.db"))
    app.dependency_overrides[get_repository] = lambda: repository
    return repository
