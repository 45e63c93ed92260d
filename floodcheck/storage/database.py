"""SQLite access for the token registry and the flood check audit log."""

import importlib
import pkgutil
import re
import sqlite3
from pathlib import Path

MIGRATIONS_PACKAGE = "floodcheck.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATION_NAME = re.compile(r"^v\d{3}_\w+$")
BUSY_TIMEOUT_MS = 5000


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the database in WAL mode, creating its directory if needed.

    WAL lets `history` and `health` read while the daemon appends a record.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    return conn


def open_database(db_path: str | Path) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path)
    run_migrations(conn)
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply migrations not yet recorded in schema_versions, oldest first.

    Returns the names applied by this call.
    """
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_versions ("
            "version TEXT PRIMARY KEY, "
            "applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
        )
    done = {version for (version,) in conn.execute("SELECT version FROM schema_versions")}

    pending = [name for name in _discover_migrations() if name not in done]
    for name in pending:
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        with conn:
            module.up(conn)
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
    return pending


def _discover_migrations() -> list[str]:
    names = (info.name for info in pkgutil.iter_modules([str(MIGRATIONS_DIR)]))
    return sorted(name for name in names if MIGRATION_NAME.match(name))
