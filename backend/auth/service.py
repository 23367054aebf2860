from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from backend.auth.config import AuthConfig
from backend.auth.errors import (
    AccountNotFound,
    AuthError,
    DuplicateAccount,
    InternalFault,
    InvalidCredentials,
    Result,
    Unauthorized,
    ValidationError,
)
from backend.auth.models import Account
from backend.auth.oauth import GoogleOAuthClient
from backend.auth.passwords import (
    MAX_PASSWORD_BYTES,
    burn_verify,
    hash_password,
    password_too_long,
    verify_password,
)
from backend.auth.reconcile import resolve_account
from backend.auth.session import SessionCodec
from backend.store.base import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthOutcome:
    """What the HTTP layer should send back for a successful operation."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)
    session_token: Optional[str] = None
    clear_session: bool = False
    redirect_url: Optional[str] = None


def _field(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _boundary(op: Callable[..., Result[AuthOutcome]]) -> Callable[..., Result[AuthOutcome]]:
    """Nothing escapes an operation: raised auth errors and crashes become failures."""

    @functools.wraps(op)
    def wrapper(self: "AuthService", *args: Any, **kwargs: Any) -> Result[AuthOutcome]:
        try:
            return op(self, *args, **kwargs)
        except InternalFault as e:
            logger.exception("%s failed: %s", op.__name__, type(e).__name__)
            return Result.failure(InternalFault())
        except AuthError as e:
            return Result.failure(e)
        except Exception:
            logger.exception("%s failed unexpectedly", op.__name__)
            return Result.failure(InternalFault())

    return wrapper


class AuthService:
    """
    Register, login, Google callback, logout and current-user lookups.

    Every public operation returns a `Result[AuthOutcome]` and never raises.
    """

    def __init__(
        self,
        cfg: AuthConfig,
        store: AccountStore,
        *,
        codec: Optional[SessionCodec] = None,
        oauth: Optional[GoogleOAuthClient] = None,
    ) -> None:
        self.cfg = cfg
        self.store = store
        self.codec = codec or SessionCodec(cfg)
        self.oauth = oauth or GoogleOAuthClient(cfg)

    def _start_session(self, account: Account, *, status_code: int, message: str) -> Result[AuthOutcome]:
        token = self.codec.issue(account.id)
        return Result.success(
            AuthOutcome(
                status_code=status_code,
                body={"message": message, "user": account.public()},
                session_token=token,
            )
        )

    @_boundary
    def register(self, name: Any, email: Any, password: Any) -> Result[AuthOutcome]:
        name, email = _field(name), _field(email)
        password = password if isinstance(password, str) else ""
        if not name or not email or not password:
            return Result.failure(ValidationError())
        if password_too_long(password):
            return Result.failure(ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes."))

        # Fail before writing anything if sessions cannot be signed.
        self.codec.ensure_ready()

        # Fast path only; the store's unique constraint is what actually decides.
        if self.store.get_by_email(email) is not None:
            return Result.failure(DuplicateAccount())

        password_hash = hash_password(password, self.cfg.bcrypt_rounds)
        try:
            account = self.store.create(name, email, password_hash)
        except DuplicateAccount as e:
            return Result.failure(e)

        logger.info("Registered account %s", account.id)
        return self._start_session(account, status_code=201, message="User registered successfully.")

    @_boundary
    def login(self, email: Any, password: Any) -> Result[AuthOutcome]:
        email = _field(email)
        password = password if isinstance(password, str) else ""
        if not email or not password:
            return Result.failure(ValidationError())

        account = self.store.get_by_email(email)
        if account is None or not account.has_password or password_too_long(password):
            # Same bcrypt cost as a real check, whichever way this fails.
            burn_verify(password, self.cfg.bcrypt_rounds)
            return Result.failure(InvalidCredentials())
        if not verify_password(password, account.password_hash):
            return Result.failure(InvalidCredentials())

        logger.info("Login for account %s", account.id)
        return self._start_session(account, status_code=200, message="Login successful.")

    @_boundary
    def oauth_callback(self, code: Optional[str] = None) -> Result[AuthOutcome]:
        if not self.cfg.google_client_id or not self.cfg.google_client_secret:
            logger.error("Google sign-in requested but GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET are not set")
            return Result.failure(InternalFault())

        code = _field(code)
        if not code:
            return Result.success(AuthOutcome(status_code=302, redirect_url=self.oauth.authorization_url()))

        self.codec.ensure_ready()

        identity = self.oauth.fetch_identity(code)
        if not identity.ok:
            return Result.failure(identity.error)

        account = resolve_account(self.store, identity.value)
        if not account.ok:
            return Result.failure(account.error)

        logger.info("Google login for account %s", account.value.id)
        return self._start_session(account.value, status_code=200, message="Google login successful.")

    def logout(self) -> Result[AuthOutcome]:
        return Result.success(AuthOutcome(status_code=200, body={"message": "Logout successful."}, clear_session=True))

    @_boundary
    def current_identity(self, subject: Optional[str]) -> Result[AuthOutcome]:
        if not subject:
            return Result.failure(Unauthorized())
        account = self.store.get_by_id(subject)
        if account is None:
            return Result.failure(AccountNotFound())
        return Result.success(
            AuthOutcome(
                status_code=200,
                body={"message": "User profile retrieved successfully.", "user": account.public()},
            )
        )
