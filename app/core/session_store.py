from __future__ import annotations

import json
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Protocol

from app.core.config import settings

RESUME_KEY = "resumeData"
JOB_LISTINGS_KEY = "jobListings"
JOB_RANKINGS_KEY = "jobRankings"
ALL_JOB_RANKINGS_KEY = "allJobRankings"
DISPLAY_INDEX_KEY = "currentDisplayIndex"


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store; values are JSON round-tripped so both stores behave alike."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._data[key] = payload

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class SqliteKeyValueStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS session_values (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            self._conn = conn
            return conn

    def get(self, key: str, default: Any = None) -> Any:
        conn = self._get_connection()
        with self._lock:
            row = conn.execute(
                "SELECT value_json FROM session_values WHERE key = ?",
                (key,),
            ).fetchone()
        if not row:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        conn = self._get_connection()
        payload = json.dumps(value, ensure_ascii=False)
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._lock:
            conn.execute(
                """
                INSERT INTO session_values (key, value_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = excluded.updated_at
                """,
                (key, payload, now_iso),
            )

    def delete(self, key: str) -> None:
        conn = self._get_connection()
        with self._lock:
            conn.execute("DELETE FROM session_values WHERE key = ?", (key,))

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def build_session_store() -> KeyValueStore:
    if settings.session_store_backend == "memory":
        return InMemoryKeyValueStore()
    return SqliteKeyValueStore(settings.session_store_path)
