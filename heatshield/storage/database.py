"""SQLite access: WAL connections and versioned schema migrations.

Migrations are modules named ``v###_<name>`` in ``heatshield.storage.migrations``,
each exposing ``up(conn)``. Applied names are recorded in ``schema_versions``.
"""

import importlib
import logging
import pkgutil
import re
import sqlite3
from pathlib import Path

from heatshield.storage import migrations

logger = logging.getLogger(__name__)

_MIGRATION_NAME = re.compile(r"^v\d{3}_\w+$")

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
)


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open ``db_path`` with dict-style rows, creating its directory on first use."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    for pragma in _PRAGMAS:
        conn.execute(pragma)
    return conn


def _available_migrations() -> list[str]:
    names = (m.name for m in pkgutil.iter_modules(migrations.__path__))
    return sorted(n for n in names if _MIGRATION_NAME.match(n))


def _applied_migrations(conn: sqlite3.Connection) -> set[str]:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_versions (
            version TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.commit()
    return {version for (version,) in conn.execute("SELECT version FROM schema_versions")}


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply every migration not yet recorded, oldest first. Returns the names applied."""
    done = _applied_migrations(conn)
    pending = [name for name in _available_migrations() if name not in done]
    for name in pending:
        logger.info("Applying migration %s", name)
        module = importlib.import_module(f"{migrations.__name__}.{name}")
        module.up(conn)
        with conn:
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
    return pending


def open_db(db_path: str | Path) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path)
    run_migrations(conn)
    return conn
