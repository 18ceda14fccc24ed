"""Shared database connection context manager.

Provides guaranteed connection cleanup via context manager pattern.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union


@contextmanager
def get_db(db_path: Union[str, Path]) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections.

    Args:
        db_path: Path to the SQLite database file.

    Yields:
        sqlite3.Connection with row_factory set to sqlite3.Row and foreign
        keys enabled

    Example:
        with get_db(path) as conn:
            conn.execute("SELECT * FROM mandalarts")
    """
    conn = None
    try:
        conn = sqlite3.connect(str(db_path), timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
    finally:
        if conn:
            conn.close()
