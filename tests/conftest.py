import pytest
from datetime import datetime

from fastapi.testclient import TestClient

from todoapp.config import get_settings
from todoapp.db import dispose_engine, init_db
from todoapp.models.todos import Todo


# --- Canned records ---

SAMPLE_TODO = Todo(
    id=1,
    title="Buy milk",
    completed=False,
    created_at=datetime(2025, 1, 1, 12, 0, 0),
)

SAMPLE_DONE = Todo(
    id=2,
    title="Walk dog",
    completed=True,
    created_at=datetime(2025, 1, 2, 9, 30, 0),
    updated_at=datetime(2025, 1, 2, 10, 0, 0),
)


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file for every test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'todos.sqlite3'}")
    get_settings.cache_clear()
    dispose_engine()
    init_db()
    yield
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def api_client():
    """FastAPI TestClient for the real app."""
    from todoapp.main import api
    return TestClient(api)
