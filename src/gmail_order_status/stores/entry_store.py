"""
SQLite entry value store.

Holds one value per (entry id, field id). Writing the same pair again
updates the existing row, so repeated runs stay idempotent.
"""

from datetime import datetime
import logging
from pathlib import Path
import sqlite3
from typing import Any

from gmail_order_status.settings import get_settings

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS entry_values (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    entry_id INTEGER NOT NULL,
    field_id INTEGER NOT NULL,
    value TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_entry_values_entry_field
    ON entry_values (entry_id, field_id);
"""


class EntryStore:
    """Read and upsert entry field values."""

    def __init__(self, db_path: str | Path | None = None):
        """
        Initialize the entry store.

        Args:
            db_path: Path to the SQLite file, or ":memory:"
        """
        if db_path is None:
            db_path = get_settings().entries_db_path
        self.db_path = str(db_path)
        self._connection: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(self.db_path)
            self._connection.row_factory = sqlite3.Row
            self._connection.executescript(SCHEMA)
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "EntryStore":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def upsert(self, entry_id: int, field_id: int, value: str) -> bool:
        """
        Set the value of one entry field.

        Returns:
            False when either id is not positive or the write failed
        """
        if int(entry_id) <= 0 or int(field_id) <= 0:
            return False

        now = datetime.now().isoformat()
        conn = self._get_connection()
        try:
            with conn:
                row = conn.execute(
                    "SELECT id FROM entry_values WHERE entry_id = ? AND field_id = ?",
                    (entry_id, field_id),
                ).fetchone()
                if row is not None:
                    conn.execute(
                        "UPDATE entry_values SET value = ?, updated_at = ? WHERE id = ?",
                        (value, now, row["id"]),
                    )
                else:
                    conn.execute(
                        "INSERT INTO entry_values (entry_id, field_id, value, created_at, updated_at)"
                        " VALUES (?, ?, ?, ?, ?)",
                        (entry_id, field_id, value, now, now),
                    )
        except sqlite3.Error as e:
            logger.error(f"Failed to write entry {entry_id} field {field_id}: {e}")
            return False
        return True

    def get_value(self, entry_id: int, field_id: int) -> str | None:
        row = self._get_connection().execute(
            "SELECT value FROM entry_values WHERE entry_id = ? AND field_id = ?",
            (entry_id, field_id),
        ).fetchone()
        return row["value"] if row else None

    def get_values(self, entry_id: int) -> dict[int, str]:
        """All field values of one entry."""
        rows = self._get_connection().execute(
            "SELECT field_id, value FROM entry_values WHERE entry_id = ? ORDER BY field_id",
            (entry_id,),
        )
        return {row["field_id"]: row["value"] for row in rows}

    def count(self) -> int:
        row = self._get_connection().execute("SELECT COUNT(*) FROM entry_values").fetchone()
        return int(row[0])
