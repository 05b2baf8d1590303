# ruff: noqa: E402, I001
"""Pytest configuration and shared fixtures.

Each test gets its own file-backed SQLite database under ``tmp_path`` and a
session bound to it. Environment variables the package reads are cleared so
a developer's ``.env`` or shell cannot leak into a test run.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make the workspace packages importable without an editable install
_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in (str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT))
    if p not in sys.path
]

from db.client import dispose_engines, get_session
from db.models.expenses import ExpenseAccount, User
from sqlalchemy.orm import Session

from tests.helpers.db import bootstrap_sqlite_db, make_account, make_user


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for var in ("DATABASE_URL", "SPENDING_TRACKER_LOG_LEVEL", "SPENDING_TRACKER_DEFAULT_USER_ID"):
        monkeypatch.delenv(var, raising=False)
    yield
    dispose_engines()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "spending.db")


@pytest.fixture
def session(db_url: str) -> Iterator[Session]:
    s = get_session(database_url=db_url)
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def user(session: Session) -> User:
    return make_user(session, name="Alice")


@pytest.fixture
def other_user(session: Session) -> User:
    return make_user(session, name="Bob")


@pytest.fixture
def account(session: Session, user: User) -> ExpenseAccount:
    return make_account(session, user, name="Checking")
