from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from backend.auth.errors import DuplicateAccount
from backend.auth.models import Account


class MemoryAccountStore:
    """In-process account store (thread-safe); unique on exact email."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[str, Account] = {}
        self._id_by_email: Dict[str, str] = {}

    def get_by_email(self, email: str) -> Optional[Account]:
        with self._lock:
            account_id = self._id_by_email.get(email)
            return self._by_id.get(account_id) if account_id else None

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._by_id.get(account_id)

    def create(self, name: str, email: str, password_hash: str) -> Account:
        with self._lock:
            if email in self._id_by_email:
                raise DuplicateAccount()
            account = Account(id=str(uuid.uuid4()), name=name, email=email, password_hash=password_hash)
            self._by_id[account.id] = account
            self._id_by_email[email] = account.id
            return account

    def count_by_email(self, email: str) -> int:
        with self._lock:
            return 1 if email in self._id_by_email else 0

    def delete(self, account_id: str) -> None:
        with self._lock:
            account = self._by_id.pop(account_id, None)
            if account is not None:
                self._id_by_email.pop(account.email, None)
