from __future__ import annotations

from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import requests

from backend.auth.errors import (
    UpstreamTokenExchangeFailed,
    UpstreamTokenVerificationFailed,
    UpstreamUnavailable,
)
from backend.auth.oauth import GoogleOAuthClient


def _resp(status: int, body=None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 400
    r.json.return_value = body
    return r


def _client(auth_cfg, *, post=None, get=None):
    http = MagicMock()
    if isinstance(post, Exception):
        http.post.side_effect = post
    else:
        http.post.return_value = post
    if isinstance(get, Exception):
        http.get.side_effect = get
    else:
        http.get.return_value = get
    return GoogleOAuthClient(auth_cfg, session=http), http


def test_authorization_url_params(auth_cfg) -> None:
    url = GoogleOAuthClient(auth_cfg, session=MagicMock()).authorization_url()
    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == auth_cfg.google_auth_url
    q = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    assert q == {
        "client_id": "test-client-id",
        "redirect_uri": auth_cfg.google_redirect_uri,
        "response_type": "code",
        "scope": "profile email",
        "access_type": "offline",
        "prompt": "consent",
    }


def test_fetch_identity_happy_path(auth_cfg) -> None:
    client, http = _client(
        auth_cfg,
        post=_resp(200, {"id_token": "idt", "access_token": "at"}),
        get=_resp(200, {"email": "bob@x.com", "name": "Bob"}),
    )
    res = client.fetch_identity("the-code")
    assert res.ok
    assert res.value.email == "bob@x.com"
    assert res.value.name == "Bob"

    _, kwargs = http.post.call_args
    assert kwargs["data"] == {
        "code": "the-code",
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "redirect_uri": auth_cfg.google_redirect_uri,
        "grant_type": "authorization_code",
    }
    assert kwargs["timeout"] == auth_cfg.oauth_timeout_seconds
    _, get_kwargs = http.get.call_args
    assert get_kwargs["params"] == {"id_token": "idt"}


def test_token_exchange_failure_mirrors_status(auth_cfg) -> None:
    client, http = _client(auth_cfg, post=_resp(401, {"error": "invalid_client"}))
    res = client.fetch_identity("code")
    assert isinstance(res.error, UpstreamTokenExchangeFailed)
    assert res.error.status_code == 401
    assert res.error.message == "Failed to get tokens from Google"
    http.get.assert_not_called()


def test_token_verification_failure_mirrors_status(auth_cfg) -> None:
    client, _ = _client(auth_cfg, post=_resp(200, {"id_token": "idt"}), get=_resp(400, {"error": "invalid_token"}))
    res = client.fetch_identity("code")
    assert isinstance(res.error, UpstreamTokenVerificationFailed)
    assert res.error.status_code == 400
    assert res.error.message == "Failed to verify ID token"


def test_missing_id_token_is_upstream_error(auth_cfg) -> None:
    client, http = _client(auth_cfg, post=_resp(200, {"access_token": "at"}))
    res = client.fetch_identity("code")
    assert isinstance(res.error, UpstreamTokenExchangeFailed)
    assert res.error.status_code == 502
    http.get.assert_not_called()


def test_missing_email_claim_is_upstream_error(auth_cfg) -> None:
    client, _ = _client(auth_cfg, post=_resp(200, {"id_token": "idt"}), get=_resp(200, {"name": "No Email"}))
    res = client.fetch_identity("code")
    assert isinstance(res.error, UpstreamTokenVerificationFailed)
    assert res.error.status_code == 502


def test_missing_name_falls_back_to_email_local_part(auth_cfg) -> None:
    client, _ = _client(auth_cfg, post=_resp(200, {"id_token": "idt"}), get=_resp(200, {"email": "carol@x.com"}))
    res = client.fetch_identity("code")
    assert res.ok
    assert res.value.name == "carol"


def test_timeout_is_retryable_unavailable(auth_cfg) -> None:
    client, _ = _client(auth_cfg, post=requests.Timeout("slow"))
    res = client.fetch_identity("code")
    assert isinstance(res.error, UpstreamUnavailable)
    assert res.error.status_code == 503
    assert res.error.retryable is True


def test_connection_error_during_verification(auth_cfg) -> None:
    client, _ = _client(auth_cfg, post=_resp(200, {"id_token": "idt"}), get=requests.ConnectionError("down"))
    assert isinstance(client.fetch_identity("code").error, UpstreamUnavailable)
