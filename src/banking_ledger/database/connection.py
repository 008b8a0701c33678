import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

Connection = sqlite3.Connection

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
DB_PATH_ENV = "BANKING_LEDGER_DB_PATH"
DEFAULT_DB_PATH = "data/ledger.db"

class DatabaseConfig:
    """Where the ledger's SQLite file lives. BANKING_LEDGER_DB_PATH overrides the default."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path or os.getenv(DB_PATH_ENV, DEFAULT_DB_PATH))
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

class DatabaseManager:
    """
    Owns the single SQLite connection behind the key/value storage.

    The connection opens lazily and creates the schema, so a fresh file
    works without running scripts/init_db.py first.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._connection: Connection | None = None

    def get_connection(self) -> Connection:
        if self._connection is None:
            conn = sqlite3.connect(str(self.config.db_path.absolute()))
            conn.row_factory = sqlite3.Row
            execute_schema(conn, SCHEMA_PATH)
            self._connection = conn
        return self._connection

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Run the block's writes as one unit: commit when it finishes, roll back if it raises.

        Usage:
            with db_manager.transaction() as conn:
                conn.execute("DELETE FROM storage WHERE key = ?", (key,))
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

def execute_schema(conn: Connection, schema_path: Path) -> None:
    """Run a .sql file against the connection. Its statements must be safe to repeat."""
    conn.executescript(schema_path.read_text())
    conn.commit()
