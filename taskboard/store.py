"""
TaskBoard storage backend (SQLite key-value table).

Every collection is persisted as one JSON document under a string key and is
read and written as a whole snapshot. Callers do read → modify → write; two
interleaved writers can lose an update (single-client design).
"""
import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Dict, Any

from .errors import StorageParseError

logger = logging.getLogger(__name__)

USERS_KEY = "taskmanager_users"
TASKS_KEY = "taskmanager_tasks"
AUTH_KEY = "taskmanager_auth"

DEFAULT_DB = Path.home() / ".local" / "share" / "taskboard" / "taskboard.db"


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def default_db_path() -> str:
    """TASKBOARD_DB wins over the per-user default location."""
    env = os.environ.get("TASKBOARD_DB")
    if env:
        return env
    return str(DEFAULT_DB)


def decode_collection(raw: str) -> List[Dict[str, Any]]:
    """Parse a stored collection blob, raising StorageParseError when corrupted."""
    try:
        records = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise StorageParseError(f"collection is not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise StorageParseError(f"collection is a {type(records).__name__}, expected a list")
    return [r for r in records if isinstance(r, dict)]


class KeyValueStore:
    """Durable string-keyed store holding the account, task and session blobs."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize store and create the table if needed."""
        if db_path is None:
            db_path = default_db_path()
        self.db_path = str(Path(db_path).expanduser())
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    # ── Raw values ───────────────────────────────────────────────────────────

    def read_value(self, key: str) -> Optional[str]:
        """Return the stored text for `key`, or None if absent."""
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ? LIMIT 1", (key,)
            ).fetchone()
        return row["value"] if row else None

    def write_value(self, key: str, value: str) -> None:
        """Insert or replace the text stored under `key`."""
        now = datetime.now(timezone.utc).isoformat()
        with _connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (key, value, now))
            conn.commit()

    def remove(self, key: str) -> None:
        with _connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()

    def keys(self) -> List[str]:
        with _connect(self.db_path) as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]

    # ── Collections ──────────────────────────────────────────────────────────

    def read_collection(self, name: str) -> List[Dict[str, Any]]:
        """
        Read a whole collection.

        Absent keys (first run) and corrupted blobs both read as an empty list;
        corruption is logged, never raised.
        """
        raw = self.read_value(name)
        if raw is None:
            return []
        try:
            return decode_collection(raw)
        except StorageParseError as e:
            logger.warning(f"Discarding corrupted collection {name}: {e}")
            return []

    def write_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        """Replace a whole collection."""
        self.write_value(name, json.dumps(list(records), ensure_ascii=False))
