from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

import jwt  # PyJWT

from backend.auth.config import AuthConfig
from backend.auth.errors import InvalidToken, Result, SessionKeyMissing
from backend.auth.models import SessionClaims

ALGORITHM = "HS256"


class SessionCodec:
    """Signs and verifies session tokens (HS256 JWT with sub/iat/exp)."""

    def __init__(self, cfg: AuthConfig) -> None:
        self._secret = cfg.session_secret
        self._ttl = cfg.session_ttl_seconds

    def _key(self) -> str:
        if not self._secret:
            raise SessionKeyMissing()
        return self._secret

    def ensure_ready(self) -> None:
        """
        Raises:
            SessionKeyMissing: if no signing secret is configured
        """
        self._key()

    def issue(self, subject: str, ttl_seconds: Optional[int] = None, *, now: Optional[float] = None) -> str:
        """
        Mint a token for `subject`.

        Raises:
            SessionKeyMissing: if no signing secret is configured
        """
        issued = int(now if now is not None else time.time())
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        payload = {"sub": str(subject), "iat": issued, "exp": issued + int(ttl)}
        return jwt.encode(payload, self._key(), algorithm=ALGORITHM)

    def verify(self, token: str) -> Result[SessionClaims]:
        """
        Check signature and expiry.

        Bad signature, malformed token and expiry all come back as `InvalidToken`
        (reason kept for logs). A missing secret raises, since that is a deployment
        fault rather than a client one.
        """
        key = self._key()
        try:
            data = jwt.decode(
                token,
                key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            return Result.failure(InvalidToken("Expired"))
        except jwt.InvalidTokenError:
            return Result.failure(InvalidToken("InvalidSignature"))

        subject = str(data.get("sub") or "").strip()
        if not subject:
            return Result.failure(InvalidToken("InvalidSignature"))
        return Result.success(
            SessionClaims(
                subject=subject,
                issued_at=datetime.fromtimestamp(int(data["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(data["exp"]), tz=timezone.utc),
            )
        )
