"""Database migrations for users and mandalarts tables."""

import sqlite3
from pathlib import Path


MIGRATIONS = [
    # Users (auto-registered on first login)
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        password_hash TEXT,
        avatar TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Generated grids, one row per history item
    """
    CREATE TABLE IF NOT EXISTS mandalarts (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        main_goal TEXT NOT NULL,
        sub_goals JSON NOT NULL,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_mandalarts_user ON mandalarts(user_id, created_at)",
]


def run_migrations(db_path: Path) -> None:
    """Run all migrations to set up the planner tables."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=10)
    try:
        cursor = conn.cursor()
        cursor.execute("PRAGMA journal_mode = WAL")

        for migration in MIGRATIONS:
            cursor.execute(migration)

        for index in INDEXES:
            cursor.execute(index)

        conn.commit()
    finally:
        conn.close()
