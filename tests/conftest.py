"""Shared test fixtures."""

import base64
import json
import time

import pytest

from config.settings import reset_settings
from core.models import Column, ColumnType, Table, User
from services.session import SessionManager
from services.storage import MemoryStore


def make_token(exp) -> str:
    """Unsigned JWT-shaped token carrying the given ``exp`` claim."""

    def _segment(obj) -> str:
        raw = json.dumps(obj).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{_segment({'alg': 'HS256', 'typ': 'JWT'})}.{_segment({'sub': 'u1', 'exp': exp})}.signature"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Point persisted state at a temp dir and re-read settings per test."""
    monkeypatch.setenv("INSIGHTBOARD_STORAGE", str(tmp_path / "session.json"))
    monkeypatch.setenv("INSIGHTBOARD_API_URL", "http://127.0.0.1:9/api")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def valid_token():
    return make_token(time.time() + 3600)


@pytest.fixture
def expired_token():
    return make_token(time.time() - 3600)


@pytest.fixture
def sample_user():
    return User(id="u1", name="Ada Lovelace", email="ada@example.com", created_at="2025-01-01T00:00:00Z")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session_manager(store):
    manager = SessionManager(store)
    manager.initialize()
    return manager


@pytest.fixture
def signed_in_session(session_manager, sample_user, valid_token):
    session_manager.set_session(sample_user, valid_token)
    return session_manager


@pytest.fixture
def financial_table():
    """Monthly financial dataset in the shape the upload parser produces."""
    columns = [
        Column(name="Month", type=ColumnType.STRING),
        Column(name="Revenue ($)", type=ColumnType.NUMBER),
        Column(name="Marketing Spend ($)", type=ColumnType.NUMBER),
        Column(name="Ops Spend ($)", type=ColumnType.NUMBER),
        Column(name="Net Profit ($)", type=ColumnType.NUMBER),
    ]
    rows = [
        {"Month": "Jan", "Revenue ($)": "1000", "Marketing Spend ($)": "100",
         "Ops Spend ($)": "50", "Net Profit ($)": "850"},
        {"Month": "Feb", "Revenue ($)": "1200", "Marketing Spend ($)": "120",
         "Ops Spend ($)": "60", "Net Profit ($)": "1020"},
        {"Month": "Mar", "Revenue ($)": "900", "Marketing Spend ($)": "80",
         "Ops Spend ($)": "40", "Net Profit ($)": "780"},
    ]
    return Table(rows=rows, columns=columns)
