"""Shared test fixtures for TaskBoard tests."""

import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskboard.api import TaskManagerAPI
from taskboard.identity import IdentityService
from taskboard.store import KeyValueStore


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "taskboard.db")


@pytest.fixture
def store(db_path):
    return KeyValueStore(db_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def identity(clock):
    return IdentityService(clock=clock)


@pytest.fixture
def api(store, identity):
    return TaskManagerAPI(store, identity=identity, latency_scale=0)


@pytest.fixture
def alice(api):
    """Registered account 'alice' → (user, token)."""
    response = api.register({"username": "alice", "password": "pw1"})
    assert response.success
    return response.data["user"], response.data["token"]


@pytest.fixture
def bob(api):
    response = api.register({"username": "bob", "password": "pw2"})
    assert response.success
    return response.data["user"], response.data["token"]
