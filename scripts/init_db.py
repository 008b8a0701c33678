#!/usr/bin/env python3
"""
Initialize the ledger's local storage database.

The CLI creates the schema on first use as well; run this to create the
file up front or to check which schema version an existing file has.
"""
from banking_ledger.config.settings import LedgerSettings
from banking_ledger.database.connection import DatabaseConfig, DatabaseManager, SCHEMA_PATH, execute_schema

def main():
    """initialize the database."""

    settings = LedgerSettings.from_config()

    config = DatabaseConfig(settings.db_path)
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        conn = db.get_connection()

        print(f"Executing schema from: {SCHEMA_PATH}")
        execute_schema(conn, SCHEMA_PATH)

        cursor = conn.execute(
            "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
        )
        row = cursor.fetchone()

        if row:
            print(f"✓ Database initialized successfully!")
            print(f"  Schema version: {row['version']}")
            print(f"  Description: {row['description']}")
        else:
            print("✗ Database initialization may have failed")

        stored = conn.execute("SELECT COUNT(*) AS n FROM storage").fetchone()
        print(f"  Stored keys: {stored['n']}")

if __name__ == "__main__":
    main()
