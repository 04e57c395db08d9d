"""Runtime configuration for ``monthly_recap``.

Settings come from the environment, after a local ``.env`` (if any) has been
loaded without overriding variables that are already set:

- ``DATABASE_URL``: SQLAlchemy URL of the record database. When unset, the
  application runs against a seeded in-memory store.
- ``RECAP_FUZZY_THRESHOLD``: maximum fuzzy-match distance (0 = exact,
  1 = anything) used to correct item/customer/store names. Default ``0.3``.
- ``RECAP_LOG_LEVEL``: logging level name or number (read by
  :mod:`monthly_recap.logging_setup`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from .ingest.fuzzy import DEFAULT_THRESHOLD
from .store import InMemoryStore, RecordStore, SqlStore

_THRESHOLD_ENV = "RECAP_FUZZY_THRESHOLD"


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str | None = None
    fuzzy_threshold: float = DEFAULT_THRESHOLD
    log_level: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.fuzzy_threshold <= 1.0:
            raise ValueError(
                f"fuzzy_threshold must be within [0, 1], got {self.fuzzy_threshold!r}"
            )

    def with_overrides(
        self,
        *,
        database_url: str | None = None,
        fuzzy_threshold: float | None = None,
    ) -> Settings:
        """Return a copy with any non-``None`` override applied (CLI options win)."""

        changes: dict[str, object] = {}
        if database_url:
            changes["database_url"] = database_url
        if fuzzy_threshold is not None:
            changes["fuzzy_threshold"] = fuzzy_threshold
        return replace(self, **changes) if changes else self


def _parse_threshold(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_THRESHOLD
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{_THRESHOLD_ENV} must be a number, got {raw!r}") from exc


def load_settings(*, dotenv_path: Path | None = None) -> Settings:
    """Load ``.env`` (non-overriding) and build :class:`Settings` from the environment."""

    load_dotenv(dotenv_path=dotenv_path or Path.cwd() / ".env", override=False)
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        fuzzy_threshold=_parse_threshold(os.getenv(_THRESHOLD_ENV)),
        log_level=os.getenv("RECAP_LOG_LEVEL") or None,
    )


def build_store(settings: Settings) -> RecordStore:
    """Return the record store selected by ``settings``.

    A configured database URL yields a :class:`SqlStore` (tables are created
    on first use); otherwise a demo-seeded :class:`InMemoryStore`.
    """

    if settings.database_url:
        return SqlStore(settings.database_url, create_schema=True)
    return InMemoryStore.with_demo_data()


__all__ = ["Settings", "build_store", "load_settings"]
