from typing import Optional

from banking_ledger.database.connection import DatabaseManager
from banking_ledger.repositories.base import KeyValueStore

class SQLiteKeyValueStore(KeyValueStore):
    """
    SQLite implementation of the KeyValueStore.

    Values live in the `storage` table using raw SQL.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def get(self, key: str) -> Optional[str]:
        """Read a value, or None if the key doesn't exist"""
        conn = self.db.get_connection()
        cursor = conn.execute(
            "SELECT value FROM storage WHERE key = ?",
            (key,)
        )
        row = cursor.fetchone()

        if row is None:
            return None

        return row["value"]

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value under key."""
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO storage (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )

    def delete(self, key: str) -> bool:
        """Delete a key."""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM storage WHERE key = ?",
                (key,)
            )
            return cursor.rowcount > 0
