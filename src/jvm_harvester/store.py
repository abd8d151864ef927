from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol

from jvm_harvester.errors import StoreError
from jvm_harvester.models import FIELD_NAMES, JvmRecord, ensure_parent

logger = logging.getLogger(__name__)

_COLUMNS = FIELD_NAMES
_KEY_COLUMNS = ("vendor", "url")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS jvm_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    architecture TEXT NOT NULL,
    checksum TEXT,
    checksum_url TEXT,
    features TEXT,
    file_type TEXT NOT NULL,
    filename TEXT NOT NULL,
    image_type TEXT NOT NULL,
    java_version TEXT NOT NULL,
    jvm_impl TEXT NOT NULL,
    os TEXT NOT NULL,
    release_type TEXT NOT NULL,
    size INTEGER,
    url TEXT NOT NULL,
    vendor TEXT NOT NULL,
    version TEXT NOT NULL,
    UNIQUE(vendor, url)
);
CREATE INDEX IF NOT EXISTS idx_jvm_records_partition
    ON jvm_records(vendor, os, architecture);
"""


class RecordSession(Protocol):
    def upsert(self, records: Iterable[JvmRecord]) -> int: ...

    def distinct(self, field: str) -> list[str]: ...

    def query(self, vendor: str, os: str, architecture: str) -> set[JvmRecord]: ...


class RecordStore(RecordSession, Protocol):
    def connection(self) -> Any:
        """Context manager yielding a session bound to one connection."""
        ...


def _to_row(record: JvmRecord) -> tuple[Any, ...]:
    data = record.to_dict()
    if data["features"] is not None:
        data["features"] = json.dumps(data["features"])
    return tuple(data[name] for name in _COLUMNS)


def _from_row(row: sqlite3.Row) -> JvmRecord:
    data = {name: row[name] for name in _COLUMNS}
    if data["features"]:
        data["features"] = json.loads(data["features"])
    return JvmRecord.from_dict(data)


def _check_field(field: str) -> str:
    if field not in _COLUMNS:
        raise StoreError(f"unknown record field: {field}")
    return field


class SqliteSession:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def upsert(self, records: Iterable[JvmRecord]) -> int:
        """Insert or update records; returns how many rows actually changed."""

        columns = ", ".join(_COLUMNS)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        updates = [name for name in _COLUMNS if name not in _KEY_COLUMNS]
        assignments = ", ".join(f"{name} = excluded.{name}" for name in updates)
        changed = " OR ".join(
            f"jvm_records.{name} IS NOT excluded.{name}" for name in updates
        )
        sql = (
            f"INSERT INTO jvm_records ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT(vendor, url) DO UPDATE SET {assignments} WHERE {changed}"
        )
        rows = [_to_row(record) for record in records]
        try:
            before = self.conn.total_changes
            with self.conn:
                self.conn.executemany(sql, rows)
            return self.conn.total_changes - before
        except sqlite3.Error as exc:
            raise StoreError(f"failed to upsert {len(rows)} records: {exc}") from exc

    def distinct(self, field: str) -> list[str]:
        column = _check_field(field)
        sql = (
            f"SELECT DISTINCT {column} FROM jvm_records "
            f"WHERE {column} IS NOT NULL ORDER BY {column}"
        )
        try:
            return [str(row[0]) for row in self.conn.execute(sql)]
        except sqlite3.Error as exc:
            raise StoreError(f"failed to list distinct {field}: {exc}") from exc

    def query(self, vendor: str, os: str, architecture: str) -> set[JvmRecord]:
        sql = (
            f"SELECT {', '.join(_COLUMNS)} FROM jvm_records "
            "WHERE vendor = ? AND os = ? AND architecture = ?"
        )
        try:
            cursor = self.conn.execute(sql, (vendor, os, architecture))
            return {_from_row(row) for row in cursor}
        except sqlite3.Error as exc:
            raise StoreError(
                f"failed to query {vendor}/{os}/{architecture}: {exc}"
            ) from exc


class SqliteRecordStore:
    """Record store backed by one SQLite file.

    Every ``connection()`` checkout opens its own connection, so concurrent
    fetch tasks never share a handle; SQLite serializes the writers.
    """

    def __init__(self, path: str | Path, *, busy_timeout_s: float = 30.0) -> None:
        self.path = Path(path)
        self.busy_timeout_s = busy_timeout_s
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        try:
            ensure_parent(self.path)
            conn = sqlite3.connect(self.path, timeout=self.busy_timeout_s)
            conn.row_factory = sqlite3.Row
            if not self._initialized:
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.executescript(_SCHEMA)
                self._initialized = True
            return conn
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"failed to open database {self.path}: {exc}") from exc

    @contextmanager
    def connection(self) -> Iterator[SqliteSession]:
        conn = self._connect()
        try:
            yield SqliteSession(conn)
        finally:
            conn.close()

    def upsert(self, records: Iterable[JvmRecord]) -> int:
        with self.connection() as session:
            return session.upsert(records)

    def distinct(self, field: str) -> list[str]:
        with self.connection() as session:
            return session.distinct(field)

    def query(self, vendor: str, os: str, architecture: str) -> set[JvmRecord]:
        with self.connection() as session:
            return session.query(vendor, os, architecture)


__all__ = [
    "RecordSession",
    "RecordStore",
    "SqliteRecordStore",
    "SqliteSession",
]
