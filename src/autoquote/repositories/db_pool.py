"""Thread-local database connection management."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from autoquote.core.config import AppConfig, get_required_env

try:
    from pysqlcipher3 import dbapi2 as sqlcipher

    SQLCIPHER_AVAILABLE = True
except ImportError:
    sqlcipher = None
    SQLCIPHER_AVAILABLE = False

OPEN_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, OSError)
QUERY_ERRORS: tuple[type[Exception], ...] = (sqlite3.DatabaseError,)
INTEGRITY_ERRORS: tuple[type[Exception], ...] = (sqlite3.IntegrityError,)
if SQLCIPHER_AVAILABLE:
    OPEN_ERRORS += (sqlcipher.Error,)
    QUERY_ERRORS += (sqlcipher.DatabaseError,)
    INTEGRITY_ERRORS += (sqlcipher.IntegrityError,)

logger = logging.getLogger(__name__)


class StorageUnavailableError(RuntimeError):
    """Raised when the quote database cannot be opened or queried."""


class ThreadLocalConnection:
    """Maintain one DB connection per worker thread for SQLite/SQLCipher safety."""

    def __init__(self, config: AppConfig):
        self._config = config
        self._local = threading.local()
        self._opened: list[sqlite3.Connection] = []
        self._opened_lock = threading.Lock()

    def _open_connection(self) -> sqlite3.Connection:
        db_path = Path(self._config.database.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        if SQLCIPHER_AVAILABLE:
            connection = sqlcipher.connect(str(db_path), check_same_thread=False)
            key = get_required_env(self._config.database.key_env).replace("'", "''")
            connection.execute(f"PRAGMA key = '{key}'")
            connection.execute("PRAGMA cipher_compatibility = 4")
            connection.row_factory = sqlite3.Row
            return connection

        if not self._config.database.allow_sqlite_fallback:
            raise RuntimeError(
                "SQLCipher is required but unavailable. Install pysqlcipher3 or enable fallback."
            )

        connection = sqlite3.connect(str(db_path), check_same_thread=False)
        connection.row_factory = sqlite3.Row
        return connection

    def open(self) -> None:
        """Open the calling thread's connection so startup fails fast."""
        self.get_connection()
        logger.info("Opened quote database at %s", self._config.database.path)

    def get_connection(self) -> sqlite3.Connection:
        """Return current thread's connection, creating it when needed."""
        connection = getattr(self._local, "connection", None)
        if connection is None:
            try:
                connection = self._open_connection()
            except OPEN_ERRORS as error:
                raise StorageUnavailableError(f"Cannot open quote database: {error}") from error
            self._local.connection = connection
            with self._opened_lock:
                self._opened.append(connection)
        return connection

    def close_all(self) -> None:
        """Close every connection opened by any thread."""
        with self._opened_lock:
            opened, self._opened = self._opened, []
        for connection in opened:
            connection.close()
        self._local = threading.local()
        logger.info("Closed %d quote database connection(s)", len(opened))

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Execute a query and commit the transaction."""
        connection = self.get_connection()
        try:
            cursor = connection.cursor()
            cursor.execute(query, params)
            connection.commit()
        except INTEGRITY_ERRORS:
            raise
        except QUERY_ERRORS as error:
            raise StorageUnavailableError(f"Quote database error: {error}") from error
        return cursor

    def fetchall(self, query: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        """Fetch all rows for a query."""
        cursor = self.execute(query, params)
        return cursor.fetchall()

    def fetchone(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        """Fetch first row for a query."""
        cursor = self.execute(query, params)
        return cursor.fetchone()
