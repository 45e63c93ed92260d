"""Tests for the SQLite connection settings and schema migrations."""

from pathlib import Path

from floodcheck.storage.database import connect, open_database, run_migrations


def _tables(conn) -> set[str]:
    return {
        name
        for (name,) in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }


class TestConnect:
    def test_journal_is_wal(self, tmp_path: Path):
        conn = connect(tmp_path / "flood.db")
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        conn.close()

    def test_busy_timeout_set(self, tmp_path: Path):
        conn = connect(tmp_path / "flood.db")
        assert conn.execute("PRAGMA busy_timeout").fetchone()[0] == 5000
        conn.close()

    def test_makes_missing_directories(self, tmp_path: Path):
        conn = connect(tmp_path / "data" / "nested" / "flood.db")
        assert (tmp_path / "data" / "nested").is_dir()
        conn.close()

    def test_rows_support_column_access(self, tmp_path: Path):
        conn = open_database(tmp_path / "flood.db")
        conn.execute("INSERT INTO device_tokens (token) VALUES ('tok-a')")
        row = conn.execute("SELECT token FROM device_tokens").fetchone()
        assert row["token"] == "tok-a"
        conn.close()


class TestMigrations:
    def test_fresh_database_gets_schema(self, tmp_path: Path):
        conn = connect(tmp_path / "flood.db")
        assert run_migrations(conn) == ["v001_initial"]
        assert {"schema_versions", "device_tokens", "daily_flood_checks"} <= _tables(conn)
        conn.close()

    def test_second_run_applies_nothing(self, tmp_path: Path):
        conn = connect(tmp_path / "flood.db")
        run_migrations(conn)
        assert run_migrations(conn) == []
        conn.close()

    def test_reopen_keeps_existing_rows(self, tmp_path: Path):
        path = tmp_path / "flood.db"
        conn = open_database(path)
        conn.execute("INSERT INTO device_tokens (token) VALUES ('tok-a')")
        conn.commit()
        conn.close()

        conn = open_database(path)
        assert conn.execute("SELECT COUNT(*) FROM device_tokens").fetchone()[0] == 1
        versions = [v for (v,) in conn.execute("SELECT version FROM schema_versions")]
        assert versions == ["v001_initial"]
        conn.close()
