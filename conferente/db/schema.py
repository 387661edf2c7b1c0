"""Database schema definitions and migration helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

_SCHEMA_VERSION = 1

_DDL = """
CREATE TABLE IF NOT EXISTS tare_memory (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    supplier_key TEXT NOT NULL,
    product_key TEXT NOT NULL DEFAULT '',
    supplier TEXT NOT NULL,
    product TEXT NOT NULL DEFAULT '',
    tare_kg REAL NOT NULL DEFAULT 0.0,
    learned_seq INTEGER NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
    UNIQUE (supplier_key, product_key)
);

CREATE INDEX IF NOT EXISTS idx_tare_memory_supplier ON tare_memory(supplier_key);

CREATE TABLE IF NOT EXISTS weighing_records (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id TEXT NOT NULL UNIQUE,
    supplier TEXT NOT NULL,
    product TEXT NOT NULL,
    target_weight_kg REAL NOT NULL DEFAULT 0.0,
    gross_weight_kg REAL NOT NULL,
    tare_kg REAL NOT NULL DEFAULT 0.0,
    net_weight_kg REAL NOT NULL,
    box_quantity INTEGER NOT NULL DEFAULT 0,
    timestamp_ms INTEGER NOT NULL,
    photo_data TEXT
);

CREATE INDEX IF NOT EXISTS idx_records_timestamp ON weighing_records(timestamp_ms);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open (or create) the database and ensure the schema is up to date.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open sqlite3.Connection with the schema applied.

    Raises:
        sqlite3.DatabaseError: If the file exists but is not a database.
    """
    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode=WAL")

        try:
            row = conn.execute("SELECT version FROM schema_version").fetchone()
            current_version = row["version"] if row else 0
        except sqlite3.OperationalError:
            current_version = 0

        if current_version < _SCHEMA_VERSION:
            conn.executescript(_DDL)
            conn.execute("DELETE FROM schema_version")
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )
            conn.commit()
    except sqlite3.DatabaseError:
        conn.close()
        raise

    return conn
