"""
Failure taxonomy for the auth flows.

Each error carries the HTTP status it maps to and a client-safe message. Errors are
usually returned inside a `Result` rather than raised; a few low-level helpers raise
them and the orchestrator converts them at its boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class AuthError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"message": self.message}


class ValidationError(AuthError):
    status_code = 400
    default_message = "All fields are required."


class DuplicateAccount(AuthError):
    status_code = 400
    default_message = "User already exists."


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = "Invalid email or password."


class Unauthorized(AuthError):
    status_code = 401
    default_message = "Unauthorized."


class InvalidToken(Unauthorized):
    """
    Signature or expiry check failed.

    `reason` ("InvalidSignature" or "Expired") is for server-side logs only; the
    client always sees the same message.
    """

    default_message = "Unauthorized: Invalid token."

    def __init__(self, reason: str = "InvalidSignature", message: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(message)


class AccountNotFound(AuthError):
    status_code = 404
    default_message = "User not found."


class UpstreamProviderError(AuthError):
    """Identity provider call failed; status mirrors the provider's own code."""

    status_code = 502
    default_message = "Identity provider error"

    def __init__(self, status_code: Optional[int] = None, message: Optional[str] = None) -> None:
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class UpstreamTokenExchangeFailed(UpstreamProviderError):
    default_message = "Failed to get tokens from Google"


class UpstreamTokenVerificationFailed(UpstreamProviderError):
    default_message = "Failed to verify ID token"


class UpstreamUnavailable(UpstreamProviderError):
    """Timeout or connection failure; safe to retry."""

    status_code = 503
    default_message = "Identity provider unavailable, please retry."
    retryable = True


class InternalFault(AuthError):
    status_code = 500
    default_message = "Internal server error."


class CorruptCredential(InternalFault):
    """Stored password hash is not a valid bcrypt hash."""


class SessionKeyMissing(InternalFault):
    """No signing secret configured (JWT_SECRET)."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or an `AuthError`, never both."""

    value: Optional[T] = None
    error: Optional[AuthError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result[Any]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuthError) -> "Result[Any]":
        return cls(error=error)
