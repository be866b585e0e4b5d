import sqlite3

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "nested" / "test_db.sqlite")


def _tables(db_path):
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    finally:
        conn.close()
    return {r[0] for r in rows}


def test_migrator_applies_initial(temp_db_path):
    applied = SQLiteMigrator(temp_db_path).run_migrations()

    assert applied == ["0001_initial.sql"]
    assert {
        "_migrations",
        "users",
        "categories",
        "tags",
        "news",
        "analysis",
        "news_tags",
        "analysis_tags",
    } <= _tables(temp_db_path)


def test_migrator_is_idempotent(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path)
    migrator.run_migrations()

    assert migrator.run_migrations() == []


def test_migrator_uses_custom_dir(tmp_path, temp_db_path):
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "0001_a.sql").write_text(
        "CREATE TABLE a (id INTEGER);\n-- Down\nDROP TABLE a;\n"
    )
    (migrations / "0002_b.sql").write_text("CREATE TABLE b (id INTEGER);\n")

    applied = SQLiteMigrator(temp_db_path, migrations).run_migrations()

    assert applied == ["0001_a.sql", "0002_b.sql"]
    assert {"a", "b"} <= _tables(temp_db_path)


def test_failed_migration_raises(tmp_path, temp_db_path):
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "0001_bad.sql").write_text("CREATE TABLE (;")

    with pytest.raises(RuntimeError, match="0001_bad.sql"):
        SQLiteMigrator(temp_db_path, migrations).run_migrations()
