from __future__ import annotations

from backend.auth.config import DEFAULT_REDIRECT_URI, GOOGLE_TOKEN_URL, load_auth_config


def test_defaults(monkeypatch) -> None:
    for name in ("AUTH_SESSION_TTL_SECONDS", "GOOGLE_REDIRECT_URI", "GOOGLE_TOKEN_URL", "OAUTH_HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    load_auth_config.cache_clear()
    cfg = load_auth_config()
    assert cfg.session_secret == "test-secret-key-for-testing-purposes-only"
    assert cfg.environment == "development"
    assert cfg.cookie_secure is False
    assert cfg.session_ttl_seconds == 7 * 24 * 3600
    assert cfg.google_redirect_uri == DEFAULT_REDIRECT_URI
    assert cfg.google_token_url == GOOGLE_TOKEN_URL
    assert cfg.oauth_timeout_seconds == 10.0


def test_node_env_fallback_and_app_env_precedence(monkeypatch) -> None:
    monkeypatch.setenv("NODE_ENV", "production")
    load_auth_config.cache_clear()
    assert load_auth_config().is_production

    monkeypatch.setenv("APP_ENV", "staging")
    load_auth_config.cache_clear()
    assert not load_auth_config().cookie_secure


def test_clamps(monkeypatch) -> None:
    monkeypatch.setenv("AUTH_SESSION_TTL_SECONDS", "5")
    monkeypatch.setenv("AUTH_BCRYPT_ROUNDS", "99")
    monkeypatch.setenv("OAUTH_HTTP_TIMEOUT_SECONDS", "-1")
    load_auth_config.cache_clear()
    cfg = load_auth_config()
    assert cfg.session_ttl_seconds == 60
    assert cfg.bcrypt_rounds == 31
    assert cfg.oauth_timeout_seconds == 10.0


def test_blank_secret_is_none(monkeypatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "   ")
    load_auth_config.cache_clear()
    assert load_auth_config().session_secret is None
