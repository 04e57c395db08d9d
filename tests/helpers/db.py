"""DB helpers for tests: bootstrap a temporary SQLite DB for ``SqlStore``."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from db import Base
from db.client import init_schema, session_scope
from db.models.recap import CustomerRow, StoreRow
from sqlalchemy import text as sql_text


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    init_schema(database_url=url)
    _assert_schema_in_sync(url)
    return url


def seed_reference_names(
    *, database_url: str, customers: Iterable[str] = (), stores: Iterable[str] = ()
) -> None:
    """Insert customer and store names used as fuzzy-match targets."""

    with session_scope(database_url=database_url) as session:
        session.add_all(CustomerRow(name=n) for n in customers)
        session.add_all(StoreRow(name=n) for n in stores)


def _assert_schema_in_sync(database_url: str) -> None:
    """ORM column sets match the SQLite tables that were created."""

    with session_scope(database_url=database_url) as session:
        for table in Base.metadata.sorted_tables:
            rows = session.execute(sql_text(f"PRAGMA table_info('{table.name}')")).fetchall()
            got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
            expected = {c.name for c in table.columns}
            assert got == expected, f"{table.name} schema drift: {expected ^ got}"
