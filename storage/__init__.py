"""Storage layer for the RSE quiz.

Provides the key-value repository interface used for player progression
and its SQLite implementation.
"""

from pathlib import Path

from .base import PreferencesRepository
from .sqlite import SQLitePreferencesRepository
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "PreferencesRepository",
    # SQLite implementations
    "SQLitePreferencesRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_preferences_repo",
]


def get_preferences_repo(db_path: Path = DEFAULT_DB_PATH) -> PreferencesRepository:
    """Get a PreferencesRepository instance."""
    return SQLitePreferencesRepository(db_path)
