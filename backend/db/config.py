from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DbConfig:
    database_url: Optional[str]  # libpq URL or conninfo, passed to psycopg as-is
    account_store: str  # "memory" forces the in-process store; anything else means Postgres
    auto_migrate: bool

    @property
    def wants_postgres(self) -> bool:
        return self.account_store != "memory"

    @property
    def uses_postgres(self) -> bool:
        return self.wants_postgres and bool(self.database_url)


def load_db_config() -> DbConfig:
    return DbConfig(
        database_url=(os.getenv("DATABASE_URL") or "").strip() or None,
        account_store=(os.getenv("ACCOUNT_STORE") or "").strip().lower() or "postgres",
        auto_migrate=(os.getenv("DB_AUTO_MIGRATE") or "").strip().lower() in ("1", "true", "yes", "on"),
    )
