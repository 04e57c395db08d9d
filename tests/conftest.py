"""Pytest configuration for test isolation.

Settings are read from the environment (and a local ``.env``), so a developer's
``DATABASE_URL`` or ``RECAP_*`` variables would otherwise leak into tests and
point them at a real database. An autouse fixture clears them and runs each
test from its own temporary directory so no stray ``.env`` is picked up.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from db.client import dispose_engines
from monthly_recap.store import InMemoryStore, RecordStore, SqlStore
from tests.helpers.db import bootstrap_sqlite_db

_ENV_VARS = ("DATABASE_URL", "RECAP_FUZZY_THRESHOLD", "RECAP_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        # setenv first so teardown also removes values a test loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
    dispose_engines()


@pytest.fixture
def demo_store() -> InMemoryStore:
    """In-memory store seeded with the demo catalog, customers and stores."""

    return InMemoryStore.with_demo_data()


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> RecordStore:
    """An empty record store, once per backend."""

    if request.param == "memory":
        return InMemoryStore()
    return SqlStore(bootstrap_sqlite_db(tmp_path / "recap.db"))
