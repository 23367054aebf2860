"""Account persistence: Postgres for deployments, in-process for dev and tests."""

from __future__ import annotations

import logging
from typing import Optional

from backend.db.config import DbConfig, load_db_config
from backend.store.base import AccountStore
from backend.store.memory import MemoryAccountStore

logger = logging.getLogger(__name__)


def build_account_store(cfg: Optional[DbConfig] = None) -> AccountStore:
    """Postgres when DATABASE_URL is set, unless ACCOUNT_STORE=memory."""
    cfg = cfg or load_db_config()
    if not cfg.uses_postgres:
        if cfg.wants_postgres:
            logger.warning("DATABASE_URL not set; accounts are kept in memory and lost on restart")
        return MemoryAccountStore()

    from backend.store.postgres import PostgresAccountStore

    return PostgresAccountStore(cfg.database_url)
