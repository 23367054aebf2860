"""
Google OAuth2 authorization-code client.

The ID token is verified by calling the provider's tokeninfo endpoint rather than
checking its signature against the provider's JWKS locally. Audience and issuer are
not pinned here; the provider response is trusted as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import urlencode

import requests

from backend.auth.config import AuthConfig
from backend.auth.errors import (
    Result,
    UpstreamTokenExchangeFailed,
    UpstreamTokenVerificationFailed,
    UpstreamUnavailable,
)
from backend.auth.models import ProviderIdentity

logger = logging.getLogger(__name__)

SCOPES = ("profile", "email")


class GoogleOAuthClient:
    def __init__(self, cfg: AuthConfig, session: requests.Session | None = None) -> None:
        self._cfg = cfg
        self._http = session or requests.Session()

    def authorization_url(self) -> str:
        """Provider consent page the browser is redirected to when no code is present."""
        params = {
            "client_id": self._cfg.google_client_id or "",
            "redirect_uri": self._cfg.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self._cfg.google_auth_url}?{urlencode(params)}"

    def exchange_code(self, code: str) -> Result[Dict[str, Any]]:
        """Trade the authorization code for provider tokens."""
        payload = {
            "code": code,
            "client_id": self._cfg.google_client_id or "",
            "client_secret": self._cfg.google_client_secret or "",
            "redirect_uri": self._cfg.google_redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            r = self._http.post(self._cfg.google_token_url, data=payload, timeout=self._cfg.oauth_timeout_seconds)
        except requests.RequestException as e:
            logger.warning("Token exchange request failed: %s", type(e).__name__)
            return Result.failure(UpstreamUnavailable())
        if not r.ok:
            # Avoid leaking sensitive info; status only.
            logger.warning("Token exchange failed (status=%s)", r.status_code)
            return Result.failure(UpstreamTokenExchangeFailed(r.status_code))
        try:
            data = r.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning("Token exchange returned a non-object body")
            return Result.failure(UpstreamTokenExchangeFailed(502))
        return Result.success(data)

    def verify_id_token(self, id_token: str) -> Result[Dict[str, Any]]:
        """Ask the provider to validate the ID token and return its claims."""
        try:
            r = self._http.get(
                self._cfg.google_tokeninfo_url,
                params={"id_token": id_token},
                timeout=self._cfg.oauth_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning("Token verification request failed: %s", type(e).__name__)
            return Result.failure(UpstreamUnavailable())
        if not r.ok:
            logger.warning("Token verification failed (status=%s)", r.status_code)
            return Result.failure(UpstreamTokenVerificationFailed(r.status_code))
        try:
            data = r.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            return Result.failure(UpstreamTokenVerificationFailed(502))
        return Result.success(data)

    def fetch_identity(self, code: str) -> Result[ProviderIdentity]:
        """Run the code exchange and token verification, returning email + name."""
        tokens = self.exchange_code(code)
        if not tokens.ok:
            return Result.failure(tokens.error)

        id_token = str(tokens.value.get("id_token") or "").strip()
        if not id_token:
            logger.warning("Token response missing id_token")
            return Result.failure(UpstreamTokenExchangeFailed(502))

        claims = self.verify_id_token(id_token)
        if not claims.ok:
            return Result.failure(claims.error)

        email = str(claims.value.get("email") or "").strip()
        if "@" not in email:
            logger.warning("Verified token has no usable email claim")
            return Result.failure(UpstreamTokenVerificationFailed(502))
        name = str(claims.value.get("name") or "").strip() or email.split("@", 1)[0]
        return Result.success(ProviderIdentity(email=email, name=name))
