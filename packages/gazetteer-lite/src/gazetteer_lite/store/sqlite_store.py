"""NameStore implementation backed by a local SQLite database."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from gazetteer_core.cache.models import EntityKind, NameEntry, ensure_utc

# One table per kind of name-bearing record.
_TABLES: dict[EntityKind, str] = {
    EntityKind.organization: "organization",
    EntityKind.person: "person",
    EntityKind.equipment: "equipment",
}

_SCHEMA = "\n".join(
    f"""\
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tenant TEXT NOT NULL,
    name TEXT NOT NULL,
    updated TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_{table}_tenant ON {table}(tenant);
"""
    for table in _TABLES.values()
)


def _to_iso(value: datetime) -> str:
    # Fixed width so MAX() over the text column orders chronologically.
    return ensure_utc(value).isoformat(timespec="microseconds")


class SQLiteNameStore:
    """FreshnessOracle + NameSource over three SQLite tables.

    A connection is opened per call, so one store instance can be shared by
    concurrent resolve() callers on different threads.
    """

    def __init__(self, db_path: str = ".gazetteer/names.db") -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = str(path)
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(_SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=5)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _now_iso(self) -> str:
        return _to_iso(datetime.now(UTC))

    # -- NameStore protocol ----------------------------------------------------

    def latest_update(self, tenant: str) -> datetime | None:
        """Newest ``updated`` value across all three tables for *tenant*."""
        union = " UNION ALL ".join(
            f"SELECT MAX(updated) AS t FROM {table} WHERE tenant = ?"
            for table in _TABLES.values()
        )
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT MAX(t) FROM ({union})", (tenant,) * len(_TABLES)
            ).fetchone()
        if row is None or row[0] is None:
            return None
        return datetime.fromisoformat(row[0])

    def all_names(self, tenant: str) -> list[NameEntry]:
        """Every name of *tenant*, tagged with its kind."""
        result: list[NameEntry] = []
        with self._connect() as conn:
            for kind, table in _TABLES.items():
                rows = conn.execute(
                    f"SELECT name FROM {table} WHERE tenant = ? ORDER BY name ASC",
                    (tenant,),
                ).fetchall()
                result.extend(NameEntry(kind, name) for (name,) in rows)
        return result

    # -- maintenance -----------------------------------------------------------

    def add_name(
        self,
        tenant: str,
        kind: EntityKind | str,
        name: str,
        updated: datetime | None = None,
    ) -> int:
        """Insert a name and return its row id."""
        table = _TABLES[EntityKind(kind)]
        stamp = _to_iso(updated) if updated is not None else self._now_iso()
        with self._connect() as conn:
            cursor = conn.execute(
                f"INSERT INTO {table} (tenant, name, updated) VALUES (?, ?, ?)",
                (tenant, name, stamp),
            )
            return cursor.lastrowid

    def rename(
        self,
        kind: EntityKind | str,
        row_id: int,
        name: str,
        updated: datetime | None = None,
    ) -> bool:
        """Change a stored name. Returns False if the row does not exist."""
        table = _TABLES[EntityKind(kind)]
        stamp = _to_iso(updated) if updated is not None else self._now_iso()
        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE {table} SET name = ?, updated = ? WHERE id = ?",
                (name, stamp, row_id),
            )
            return cursor.rowcount > 0

    def counts(self, tenant: str) -> dict[str, int]:
        """Number of stored names per kind for *tenant*."""
        counts: dict[str, int] = {}
        with self._connect() as conn:
            for kind, table in _TABLES.items():
                (count,) = conn.execute(
                    f"SELECT COUNT(*) FROM {table} WHERE tenant = ?", (tenant,)
                ).fetchone()
                counts[kind.value] = count
        return counts
