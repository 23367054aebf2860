from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_REDIRECT_URI = "http://localhost:8080/api/v1/auth/google/callback"
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


@dataclass(frozen=True)
class AuthConfig:
    # Session signing
    session_secret: Optional[str]  # Required to issue or verify sessions
    session_ttl_seconds: int
    bcrypt_rounds: int

    # Deployment environment ("production" enables Secure cookies)
    environment: str

    # Google OAuth2 client
    google_client_id: Optional[str]
    google_client_secret: Optional[str]
    google_redirect_uri: str  # Must match the provider registration exactly
    google_auth_url: str = GOOGLE_AUTH_URL
    google_token_url: str = GOOGLE_TOKEN_URL
    google_tokeninfo_url: str = GOOGLE_TOKENINFO_URL
    oauth_timeout_seconds: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production


def _env_str(name: str) -> Optional[str]:
    return (os.getenv(name, "") or "").strip() or None


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def load_auth_config() -> AuthConfig:
    """
    Load authentication configuration from environment variables.

    Read once per process; tests call `load_auth_config.cache_clear()` after
    changing the environment.
    """
    ttl = _env_int("AUTH_SESSION_TTL_SECONDS", 7 * 24 * 3600)
    if ttl < 60:
        ttl = 60

    # bcrypt accepts a cost factor between 4 and 31.
    rounds = min(max(_env_int("AUTH_BCRYPT_ROUNDS", 10), 4), 31)

    timeout = _env_float("OAUTH_HTTP_TIMEOUT_SECONDS", 10.0)
    if timeout <= 0:
        timeout = 10.0

    environment = (_env_str("APP_ENV") or _env_str("NODE_ENV") or "development").lower()

    return AuthConfig(
        session_secret=_env_str("JWT_SECRET"),
        session_ttl_seconds=ttl,
        bcrypt_rounds=rounds,
        environment=environment,
        google_client_id=_env_str("GOOGLE_CLIENT_ID"),
        google_client_secret=_env_str("GOOGLE_CLIENT_SECRET"),
        google_redirect_uri=_env_str("GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        google_auth_url=_env_str("GOOGLE_AUTH_URL") or GOOGLE_AUTH_URL,
        google_token_url=_env_str("GOOGLE_TOKEN_URL") or GOOGLE_TOKEN_URL,
        google_tokeninfo_url=_env_str("GOOGLE_TOKENINFO_URL") or GOOGLE_TOKENINFO_URL,
        oauth_timeout_seconds=timeout,
    )
