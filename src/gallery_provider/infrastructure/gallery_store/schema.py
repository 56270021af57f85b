"""
Gallery store schema definitions and upgrades.
"""

import logging
import sqlite3

logger = logging.getLogger(__name__)

DATABASE_NAME = "gallery_source.db"
DATABASE_VERSION = 2

CHOSEN_PHOTOS_SCHEMA = """
CREATE TABLE IF NOT EXISTS chosen_photos (
    _id INTEGER PRIMARY KEY AUTOINCREMENT,
    uri TEXT NOT NULL,
    UNIQUE (uri) ON CONFLICT REPLACE
);
"""

METADATA_CACHE_SCHEMA = """
CREATE TABLE IF NOT EXISTS metadata_cache (
    _id INTEGER PRIMARY KEY AUTOINCREMENT,
    uri TEXT NOT NULL,
    datetime INTEGER,
    location TEXT,
    UNIQUE (uri) ON CONFLICT REPLACE
);
"""


def get_user_version(conn: sqlite3.Connection) -> int:
    """Read the schema version stored in the database header."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def set_user_version(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(f"PRAGMA user_version = {int(version)}")


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create both tables if they are absent."""
    conn.executescript(CHOSEN_PHOTOS_SCHEMA + METADATA_CACHE_SCHEMA)
    conn.commit()


def upgrade_schema(conn: sqlite3.Connection, from_version: int, to_version: int) -> None:
    """
    Upgrade an existing database from ``from_version`` to ``to_version``.

    Version 1 stored metadata in a different shape; the cache is dropped and
    recreated. Chosen photos are preserved.
    """
    if from_version < 2:
        logger.info(
            f"Upgrading gallery database from version {from_version} to {to_version}: "
            "recreating metadata_cache"
        )
        conn.execute("DROP TABLE IF EXISTS metadata_cache")
        conn.executescript(METADATA_CACHE_SCHEMA)
    conn.commit()
