from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import errors as pg_errors

from backend.auth.errors import DuplicateAccount
from backend.auth.models import Account

_COLUMNS = "id::text, name, email, password_hash"


def _row_to_account(row) -> Account:
    account_id, name, email, password_hash = row
    return Account(id=account_id, name=name, email=email, password_hash=password_hash or "")


class PostgresAccountStore:
    """Accounts in the `users` table (see backend/db/migrations)."""

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def _connect(self) -> psycopg.Connection:
        return psycopg.connect(self._dsn)

    def get_by_email(self, email: str) -> Optional[Account]:
        with self._connect() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM users WHERE email = %s", (email,)).fetchone()
        return _row_to_account(row) if row else None

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with self._connect() as conn:
            try:
                row = conn.execute(f"SELECT {_COLUMNS} FROM users WHERE id = %s::uuid", (account_id,)).fetchone()
            except pg_errors.InvalidTextRepresentation:
                # Not a uuid, so no such account.
                return None
        return _row_to_account(row) if row else None

    def create(self, name: str, email: str, password_hash: str) -> Account:
        """
        Insert a new account.

        Raises:
            DuplicateAccount: if the email already exists (unique constraint)
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"""
                    INSERT INTO users (name, email, password_hash)
                    VALUES (%s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (name, email, password_hash),
                ).fetchone()
        except pg_errors.UniqueViolation as e:
            raise DuplicateAccount() from e
        if not row:
            raise ValueError("Failed to create user")
        return _row_to_account(row)

    def count_by_email(self, email: str) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM users WHERE email = %s", (email,)).fetchone()
        return int(row[0]) if row else 0
