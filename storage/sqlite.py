"""SQLite implementation of the repository interface."""

from pathlib import Path

from .base import PreferencesRepository
from .connection import get_connection, init_schema, DEFAULT_DB_PATH


class SQLitePreferencesRepository(PreferencesRepository):
    """SQLite implementation of PreferencesRepository.

    Opens a connection per call and commits before returning, so every
    write is on disk when the method returns.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_schema(db_path)

    def get_int(self, key: str, default: int) -> int:
        """Read an integer value."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT int_value FROM preferences WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            if row is None or row["int_value"] is None:
                return default
            return row["int_value"]
        finally:
            conn.close()

    def get_float(self, key: str, default: float | None = None) -> float | None:
        """Read a real value."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT real_value FROM preferences WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            if row is None or row["real_value"] is None:
                return default
            return row["real_value"]
        finally:
            conn.close()

    def set_int(self, key: str, value: int) -> None:
        """Store an integer value."""
        self._upsert(key, int_value=value, real_value=None)

    def set_float(self, key: str, value: float) -> None:
        """Store a real value."""
        self._upsert(key, int_value=None, real_value=value)

    def has_key(self, key: str) -> bool:
        """Return True if the key is set."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT 1 FROM preferences WHERE key = ?", (key,))
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        """Remove a key."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix."""
        escaped = (
            prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "DELETE FROM preferences WHERE key LIKE ? ESCAPE '\\'",
                (escaped + "%",),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def _upsert(
        self, key: str, int_value: int | None, real_value: float | None
    ) -> None:
        """Insert or replace a preference row and commit."""
        conn = get_connection(self.db_path)
        try:
            # Use INSERT OR REPLACE for upsert behavior
            conn.execute(
                """INSERT OR REPLACE INTO preferences (key, int_value, real_value)
                VALUES (?, ?, ?)""",
                (key, int_value, real_value),
            )
            conn.commit()
        finally:
            conn.close()
