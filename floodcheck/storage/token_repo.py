"""Read access to the device token registry."""

import sqlite3


def get_device_tokens(conn: sqlite3.Connection) -> list[str]:
    """All usable tokens in registry order. Duplicates are kept, blanks dropped."""
    rows = conn.execute("SELECT token FROM device_tokens ORDER BY id").fetchall()
    return [
        row[0]
        for row in rows
        if isinstance(row[0], str) and row[0].strip()
    ]


def count_device_tokens(conn: sqlite3.Connection) -> int:
    return len(get_device_tokens(conn))
