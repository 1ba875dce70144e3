"""
PrintDesk Test Suite - Shared Fixtures

Every test gets a fresh in-memory SQLite database. The app is built once per
session so module providers and trash adapters are registered exactly as in
production.

Usage:
    pip install -e ".[test]"
    pytest tests -v --tb=short
"""

import os
import sys
from pathlib import Path

import pytest

# Must be set before core.config is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_KEY"] = ""

BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from fastapi.testclient import TestClient  # noqa: E402

from core.app import create_app  # noqa: E402
from core.base import Base, StockRestorePolicy  # noqa: E402
from core.config import settings  # noqa: E402
from core.db import SessionLocal, engine, init_db  # noqa: E402


@pytest.fixture(scope="session")
def app():
    return create_app()


@pytest.fixture(autouse=True)
def _fresh_database(app):
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def restore_policy(monkeypatch):
    """Switch the stock restore policy for one test: restore_policy("on_purge")."""
    def _set(policy):
        monkeypatch.setattr(settings, "stock_restore_policy", StockRestorePolicy(policy))
    return _set
