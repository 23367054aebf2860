from __future__ import annotations

from typing import Optional, Protocol

from backend.auth.models import Account


class AccountStore(Protocol):
    """
    Account lookup/insert keyed by unique email and by id.

    `create` raises `DuplicateAccount` when the email is taken; that is the only
    reliable duplicate signal under concurrent registrations.
    """

    def get_by_email(self, email: str) -> Optional[Account]: ...

    def get_by_id(self, account_id: str) -> Optional[Account]: ...

    def create(self, name: str, email: str, password_hash: str) -> Account: ...

    def count_by_email(self, email: str) -> int: ...
