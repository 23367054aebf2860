"""
Schema upgrades for the account store.

Each `NNNN_name.sql` file under `migrations/` runs once; its sha256 is recorded in
`schema_migrations` so an edited file that already ran is refused. One upgrade is a
single transaction holding a transaction-scoped advisory lock, so replicas starting
together apply each file exactly once.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from backend.db.config import DbConfig, load_db_config

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
UPGRADE_LOCK_KEY = 402117730091


@dataclass(frozen=True)
class SchemaStep:
    version: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()


def discover_steps(directory: Path = MIGRATIONS_DIR) -> List[SchemaStep]:
    return [SchemaStep(version=p.stem, sql=p.read_text(encoding="utf-8")) for p in sorted(directory.glob("*.sql"))]


class SchemaMigrator:
    def __init__(self, database_url: str, steps: Optional[Sequence[SchemaStep]] = None) -> None:
        self._url = database_url
        self._steps = list(steps) if steps is not None else discover_steps()

    def plan(self, recorded: Dict[str, str]) -> List[SchemaStep]:
        """
        Steps still to run, given `recorded` (version -> checksum) from the database.

        Raises:
            RuntimeError: if a step that already ran has changed on disk
        """
        drifted = [s.version for s in self._steps if s.version in recorded and recorded[s.version] != s.checksum]
        if drifted:
            raise RuntimeError(f"Applied schema files were modified: {', '.join(drifted)}")
        return [s for s in self._steps if s.version not in recorded]

    def upgrade(self) -> List[str]:
        """Run pending steps; returns the versions applied."""
        import psycopg

        # Commits on clean exit, rolls everything back on error.
        with psycopg.connect(self._url) as conn:
            conn.execute("SELECT pg_advisory_xact_lock(%s)", (UPGRADE_LOCK_KEY,))
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_migrations ("
                " version text PRIMARY KEY, checksum text NOT NULL,"
                " applied_at timestamptz NOT NULL DEFAULT now())"
            )
            recorded = {str(v): str(c) for v, c in conn.execute("SELECT version, checksum FROM schema_migrations")}
            todo = self.plan(recorded)
            for step in todo:
                conn.execute(step.sql)
                conn.execute(
                    "INSERT INTO schema_migrations (version, checksum) VALUES (%s, %s)",
                    (step.version, step.checksum),
                )
                logger.info("Schema step %s applied", step.version)
        return [s.version for s in todo]


def upgrade_on_startup(cfg: Optional[DbConfig] = None) -> Optional[str]:
    """
    Upgrade the schema when DB_AUTO_MIGRATE is on and Postgres is in use.

    Returns a status line, or None when nothing was attempted. Never raises.
    """
    cfg = cfg or load_db_config()
    if not (cfg.auto_migrate and cfg.uses_postgres):
        return None
    try:
        applied = SchemaMigrator(cfg.database_url).upgrade()
    except Exception:
        logger.exception("Schema upgrade at startup failed")
        return "schema upgrade failed"
    return f"applied {', '.join(applied)}" if applied else "schema up to date"


def main() -> int:
    cfg = load_db_config()
    if not cfg.database_url:
        print("DATABASE_URL is not set.")
        return 2
    applied = SchemaMigrator(cfg.database_url).upgrade()
    print(f"Applied: {', '.join(applied)}" if applied else "Schema up to date.")
    return 0
