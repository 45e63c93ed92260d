"""Append-only audit trail of daily flood check runs."""

import json
import sqlite3

from floodcheck.errors import AuditWriteFailure
from floodcheck.models.reporting import RunRecord


def append_run_record(conn: sqlite3.Connection, record: RunRecord) -> int:
    """Persist a run record. Returns the row id.

    created_at is assigned by the database.
    """
    try:
        cursor = conn.execute(
            "INSERT INTO daily_flood_checks "
            "(run_id, max_risk, today_risk, high_risk_periods, daily_risks, "
            "notification_type, config_hash) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                record.run_id,
                record.max_risk,
                record.today_risk,
                json.dumps(record.high_risk_periods),
                json.dumps(record.daily_risks),
                record.notification_type,
                record.config_hash,
            ),
        )
        conn.commit()
    except sqlite3.Error as e:
        raise AuditWriteFailure(f"Failed to append run record {record.run_id}: {e}") from e
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_recent_run_records(conn: sqlite3.Connection, limit: int = 10) -> list[dict]:
    """Most recent run records first, JSON columns decoded."""
    rows = conn.execute(
        "SELECT * FROM daily_flood_checks ORDER BY id DESC LIMIT ?", (limit,)
    ).fetchall()
    records = []
    for r in rows:
        record = dict(r)
        record["high_risk_periods"] = json.loads(record["high_risk_periods"])
        record["daily_risks"] = json.loads(record["daily_risks"])
        records.append(record)
    return records


def get_latest_run_record(conn: sqlite3.Connection) -> dict | None:
    records = get_recent_run_records(conn, limit=1)
    return records[0] if records else None


def count_run_records(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM daily_flood_checks").fetchone()[0]
