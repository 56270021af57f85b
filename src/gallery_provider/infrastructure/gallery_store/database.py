"""
SQLite database helper for the gallery store.

Opens the database file lazily, creates or upgrades the schema on first use
and hands out the shared connection.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .models import GalleryStoreError, SchemaVersionError
from .schema import (
    DATABASE_VERSION,
    get_user_version,
    initialize_schema,
    set_user_version,
    upgrade_schema,
)

logger = logging.getLogger(__name__)


class DatabaseHelper:
    """
    Owns the SQLite connection backing the provider.

    The connection is created on first use and kept for the lifetime of the
    helper. Readable and writable handles are the same connection, so access
    goes through a reentrant lock: a transaction belongs to the thread that
    opened it and other threads wait until it commits or rolls back.
    """

    def __init__(self, db_path: Path | str, version: int = DATABASE_VERSION):
        self._db_path = Path(db_path)
        self._version = version
        self._conn: Optional[sqlite3.Connection] = None
        self._transaction_depth = 0
        self._lock = threading.RLock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def version(self) -> int:
        return self._version

    def _open(self) -> sqlite3.Connection:
        is_memory = str(self._db_path) == ":memory:"
        if not is_memory:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        if not is_memory:
            conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        return conn

    def _prepare(self, conn: sqlite3.Connection) -> None:
        """Bring the schema up to the helper's version."""
        current = get_user_version(conn)
        if current == self._version:
            return
        if current > self._version:
            raise SchemaVersionError(
                f"Can't downgrade database from version {current} to {self._version}"
            )
        if current == 0:
            initialize_schema(conn)
            logger.info(f"Created gallery database: {self._db_path}")
        else:
            upgrade_schema(conn, current, self._version)
            initialize_schema(conn)
        set_user_version(conn, self._version)
        conn.commit()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        with self._lock:
            return self._connect_locked()

    def _connect_locked(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = self._open()
            except sqlite3.Error as e:
                raise GalleryStoreError(f"Failed to open database {self._db_path}: {e}") from e
            try:
                self._prepare(conn)
            except sqlite3.Error as e:
                conn.close()
                raise GalleryStoreError(f"Failed to prepare schema: {e}") from e
            except SchemaVersionError:
                conn.close()
                raise
            self._conn = conn
        return self._conn

    def get_writable_database(self) -> sqlite3.Connection:
        return self._get_connection()

    def get_readable_database(self) -> sqlite3.Connection:
        return self._get_connection()

    @contextmanager
    def reading(self) -> Iterator[sqlite3.Connection]:
        """Hold the connection for a read that must not see another thread's open transaction."""
        with self._lock:
            yield self._connect_locked()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block of writes as one transaction.

        Nested blocks on the same thread join the outermost transaction, which
        alone commits or rolls back.
        """
        with self._lock:
            conn = self._connect_locked()
            self._transaction_depth += 1
            try:
                yield conn
            except BaseException:
                self._transaction_depth -= 1
                if self._transaction_depth == 0:
                    conn.rollback()
                raise
            else:
                self._transaction_depth -= 1
                if self._transaction_depth == 0:
                    conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None
                    self._transaction_depth = 0
