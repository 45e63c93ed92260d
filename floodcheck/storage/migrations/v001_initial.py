"""Initial schema: device token registry and daily flood check audit trail."""

import sqlite3

DDL = [
    # Registered devices; written by the client app, read-only here
    """
    CREATE TABLE IF NOT EXISTS device_tokens (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        token TEXT,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # One row per run, append-only
    """
    CREATE TABLE IF NOT EXISTS daily_flood_checks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        max_risk REAL NOT NULL,
        today_risk REAL NOT NULL,
        high_risk_periods TEXT NOT NULL,
        daily_risks TEXT NOT NULL,
        notification_type TEXT NOT NULL DEFAULT '',
        config_hash TEXT NOT NULL DEFAULT ''
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_daily_flood_checks_created "
        "ON daily_flood_checks(created_at)"
    ),
]


def up(conn: sqlite3.Connection) -> None:
    for statement in DDL:
        conn.execute(statement)
