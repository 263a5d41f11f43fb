"""Versioned key/value storage on SQLite."""
import logging
import sqlite3
from pathlib import Path
from typing import Callable, Optional

from aurum_planner.config import DEFAULT_DB_PATH, MAX_MUTATE_RETRIES
from aurum_planner.errors import ConflictError, StorageUnavailable

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    version INTEGER NOT NULL DEFAULT 1
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    try:
        conn = sqlite3.connect(db_path)
    except sqlite3.DatabaseError as e:
        raise StorageUnavailable(str(e)) from e
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the store table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    except sqlite3.DatabaseError as e:
        raise StorageUnavailable(str(e)) from e
    finally:
        conn.close()


def kv_get(db_path: str, key: str) -> Optional[tuple[bytes, int]]:
    """Return ``(value, version)`` for ``key``, or None if absent."""
    conn = get_connection(db_path)
    try:
        row = conn.execute(
            "SELECT value, version FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
    except sqlite3.DatabaseError as e:
        raise StorageUnavailable(str(e)) from e
    finally:
        conn.close()
    return (bytes(row["value"]), row["version"]) if row else None


def kv_put(db_path: str, key: str, value: bytes, expected_version: int) -> bool:
    """Write ``value`` only if the stored version still matches.

    ``expected_version=0`` means the key must not exist yet. Returns True if
    the write happened, False if another writer got there first.
    """
    conn = get_connection(db_path)
    try:
        if expected_version == 0:
            cur = conn.execute(
                "INSERT OR IGNORE INTO kv_store (key, value, version) VALUES (?, ?, 1)",
                (key, value),
            )
        else:
            cur = conn.execute(
                "UPDATE kv_store SET value = ?, version = version + 1 WHERE key = ? AND version = ?",
                (value, key, expected_version),
            )
        conn.commit()
        written = cur.rowcount == 1
    except sqlite3.DatabaseError as e:
        raise StorageUnavailable(str(e)) from e
    finally:
        conn.close()
    return written


def update_value(
    db_path: str,
    key: str,
    fn: Callable[[Optional[bytes]], bytes],
    max_retries: int = MAX_MUTATE_RETRIES,
) -> bytes:
    """Read, transform and write ``key`` as one linearized step.

    ``fn`` gets the current value (None if absent) and returns the new one.
    When a concurrent writer wins the race, the value is re-read and ``fn``
    runs again on the fresh state. Raises ConflictError after
    ``max_retries`` lost races; the stored value is then left untouched.
    """
    for attempt in range(1, max_retries + 1):
        current = kv_get(db_path, key)
        raw, version = current if current else (None, 0)
        new_raw = fn(raw)
        if new_raw == raw:
            return raw
        if kv_put(db_path, key, new_raw, version):
            logger.debug("wrote %s at version %d", key, version + 1)
            return new_raw
        logger.debug("lost write race on %s (attempt %d/%d)", key, attempt, max_retries)
    logger.warning("gave up on %s after %d conflicting writes", key, max_retries)
    raise ConflictError(f"Too many concurrent updates to {key}")
