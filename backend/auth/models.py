from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict

# Stored in place of a hash for accounts created through delegated login.
NO_PASSWORD = ""


@dataclass(frozen=True)
class Account:
    """User account owned by the account store."""

    id: str
    name: str
    email: str
    password_hash: str = NO_PASSWORD

    @property
    def has_password(self) -> bool:
        return self.password_hash != NO_PASSWORD

    def public(self) -> Dict[str, str]:
        """Fields safe to return to a client (never the hash)."""
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class SessionClaims:
    """Verified contents of a session token."""

    subject: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class ProviderIdentity:
    """Identity asserted by the OAuth provider after token verification."""

    email: str
    name: str
