"""Relational persistence (SQLite)."""
