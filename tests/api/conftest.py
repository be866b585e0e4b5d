import os
import tempfile

import pytest

# Must be set before the app module is imported
os.environ.setdefault("FIN_DATA_DIR", tempfile.mkdtemp(prefix="fin-editorial-"))

from fastapi.testclient import TestClient  # noqa: E402

from src.adapters.sqlite.migrator import SQLiteMigrator  # noqa: E402
from src.adapters.sqlite.repos import SQLiteUserRepo  # noqa: E402
from src.api.deps import Settings, get_settings  # noqa: E402
from src.api.main import app  # noqa: E402
from src.domain.value_objects import UserRole  # noqa: E402

API = "/api/v1"


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Fresh data directory per test."""
    monkeypatch.setenv("FIN_DATA_DIR", str(tmp_path))
    test_settings = Settings()
    SQLiteMigrator(test_settings.db_path).run_migrations()
    return test_settings


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client, settings):
    """Register a user and return (auth headers, user payload)."""

    def _register(email, role=None, password="s3cretpass"):
        body = {"email": email, "password": password, "first_name": "Test", "last_name": "User"}
        resp = client.post(f"{API}/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        headers = {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}

        if role:
            # Staff roles are granted by an admin; seed them directly
            users = SQLiteUserRepo(settings.db_path)
            user = users.find_by_email(email)
            user.update_role(UserRole.from_string(role))
            users.save(user)

        me = client.get(f"{API}/auth/me", headers=headers)
        return headers, me.json()["data"]

    return _register


@pytest.fixture
def author_headers(register_user):
    headers, _ = register_user("author@example.com")
    return headers


@pytest.fixture
def editor_headers(register_user):
    headers, _ = register_user("editor@example.com", role="EDITOR")
    return headers
