import os
from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteAnalysisRepo,
    SQLiteCategoryRepo,
    SQLiteNewsRepo,
    SQLiteTagRepo,
    SQLiteUserRepo,
)
from src.rules.loader import load_rules

FIXED_NOW = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def db_path(test_data_dir):
    """A migrated SQLite database in a temporary directory."""
    path = os.path.join(test_data_dir, "editorial.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def rules():
    # Tests run from the project root
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock():
    return FixedClock(FIXED_NOW)


@pytest.fixture
def news_repo(db_path):
    return SQLiteNewsRepo(db_path)


@pytest.fixture
def analysis_repo(db_path):
    return SQLiteAnalysisRepo(db_path)


@pytest.fixture
def category_repo(db_path):
    return SQLiteCategoryRepo(db_path)


@pytest.fixture
def tag_repo(db_path):
    return SQLiteTagRepo(db_path)


@pytest.fixture
def user_repo(db_path):
    return SQLiteUserRepo(db_path)
