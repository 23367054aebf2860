"""
Pytest config.

Pins the repo root on sys.path so `import backend` works when a global `pytest`
entrypoint is used without installing the project.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

TEST_SECRET = "test-secret-key-for-testing-purposes-only"


@pytest.fixture(autouse=True)
def _auth_env(monkeypatch: pytest.MonkeyPatch):
    """
    Deterministic auth config for every test: a known signing secret, fake Google
    client credentials, the in-memory store and cheap bcrypt rounds.
    """
    from backend.api.server import reset_auth_service
    from backend.auth.config import load_auth_config

    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("ACCOUNT_STORE", "memory")
    monkeypatch.setenv("AUTH_BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("NODE_ENV", raising=False)
    monkeypatch.delenv("DB_AUTO_MIGRATE", raising=False)
    load_auth_config.cache_clear()
    reset_auth_service()
    yield
    load_auth_config.cache_clear()
    reset_auth_service()


@pytest.fixture
def auth_cfg():
    from backend.auth.config import load_auth_config

    return load_auth_config()


@pytest.fixture
def store():
    from backend.store.memory import MemoryAccountStore

    return MemoryAccountStore()


@pytest.fixture
def service(auth_cfg, store):
    from backend.auth.service import AuthService

    return AuthService(auth_cfg, store)


@pytest.fixture
def client(service):
    from fastapi.testclient import TestClient

    import backend.api.server as srv

    srv.app.dependency_overrides[srv.get_auth_service] = lambda: service
    try:
        yield TestClient(srv.app)
    finally:
        srv.app.dependency_overrides.clear()
