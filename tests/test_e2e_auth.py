"""E2E tests for authentication flows.

These tests require a running server (`python main.py --serve`) and are executed in
CI or manually.
Run with: pytest -m e2e
"""

import time
import uuid
from typing import Generator

import pytest
import requests

BASE_URL = "http://localhost:8080"
PREFIX = f"{BASE_URL}/api/v1/auth"

pytestmark = pytest.mark.e2e


@pytest.fixture(scope="module")
def wait_for_server() -> Generator[None, None, None]:
    """Wait for server to be ready."""
    max_retries = 30
    for i in range(max_retries):
        try:
            r = requests.get(f"{BASE_URL}/healthz", timeout=2)
            if r.status_code == 200:
                break
        except requests.RequestException:
            if i == max_retries - 1:
                raise Exception("Server failed to start within 30 seconds")
            time.sleep(1)
    yield


def test_me_requires_auth(wait_for_server):
    r = requests.get(f"{PREFIX}/me")
    assert r.status_code == 401


def test_register_login_logout(wait_for_server):
    email = f"e2e-{uuid.uuid4().hex[:8]}@example.com"
    s = requests.Session()

    r = s.post(f"{PREFIX}/register", json={"name": "E2E", "email": email, "password": "secret123"})
    assert r.status_code == 201, f"Register failed: {r.text}"
    assert "token" in r.cookies

    r = s.get(f"{PREFIX}/me")
    assert r.status_code == 200
    assert r.json()["user"]["email"] == email

    r = s.post(f"{PREFIX}/logout")
    assert r.status_code == 200

    r = s.get(f"{PREFIX}/me")
    assert r.status_code == 401


def test_google_callback_redirects_without_code(wait_for_server):
    r = requests.get(f"{PREFIX}/google/callback", allow_redirects=False)
    assert r.status_code in (302, 500)
