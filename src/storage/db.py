"""SQLite connection helpers for the project content store."""
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from src.app.config import get_settings

logger = logging.getLogger("project_map.storage.db")

_SCHEMA_PATH = Path(__file__).parent / "schema.sql"
_TABLES = ("item_terms", "content_items", "location_terms")


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    path = db_path or get_settings().db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: Optional[Path] = None) -> None:
    schema_sql = _SCHEMA_PATH.read_text(encoding="utf-8")
    conn = get_connection(db_path)
    try:
        conn.executescript(schema_sql)
        conn.commit()
    finally:
        conn.close()


def clear_db() -> None:
    """Delete all rows, children first, keeping the schema."""
    conn = get_connection()
    try:
        for table in _TABLES:
            conn.execute(f"DELETE FROM {table}")
        conn.commit()
        logger.info("Cleared content store")
    finally:
        conn.close()
